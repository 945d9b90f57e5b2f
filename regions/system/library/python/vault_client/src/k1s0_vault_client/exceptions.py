"""vault_client ライブラリの例外型定義"""

from __future__ import annotations


class VaultError(Exception):
    """vault_client ライブラリのエラー基底クラス。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class VaultErrorCodes:
    """VaultError のエラーコード定数。"""

    API_ERROR: str = "API_ERROR"
    FIELD_NOT_FOUND: str = "FIELD_NOT_FOUND"
    HTTP_ERROR: str = "HTTP_ERROR"
    DECODE_ERROR: str = "DECODE_ERROR"
    INVALID_ARGUMENT: str = "INVALID_ARGUMENT"
    READ_FILE: str = "READ_FILE_ERROR"
    PARSE_YAML: str = "PARSE_YAML_ERROR"
    VALIDATION: str = "VALIDATION_ERROR"


class VaultAPIError(VaultError):
    """Vault API がエラーレスポンスを返した場合のエラー。

    errors には Vault が返した ``errors`` 配列がそのまま入る。
    """

    def __init__(self, errors: list[str] | None = None, status_code: int | None = None) -> None:
        self.errors: list[str] = list(errors or [])
        self.status_code = status_code
        super().__init__(
            code=VaultErrorCodes.API_ERROR,
            message=", ".join(self.errors),
        )


class VaultFieldNotFoundError(VaultError):
    """レスポンスボディに期待したフィールドが存在しない場合のエラー。"""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(
            code=VaultErrorCodes.FIELD_NOT_FOUND,
            message=f"The field [{field}] was not found in the response body.",
        )
