"""Vault API パス組み立て"""

from __future__ import annotations

URL_PATH_SEPARATOR = "/"
DEFAULT_API_PATH = "v1"


def add_url_child_path(parent: str, child: str) -> str:
    """親パスに子パスを連結する。

    親の末尾スラッシュと子の前後スラッシュを取り除いてから ``/`` で結合する。
    """
    return (
        parent.removesuffix(URL_PATH_SEPARATOR)
        + URL_PATH_SEPARATOR
        + child.strip(URL_PATH_SEPARATOR)
    )


def build_base_url(url: str, api_path: str = DEFAULT_API_PATH) -> str:
    """全リクエストの基準となる URL（末尾スラッシュ付き）を返す。"""
    return add_url_child_path(url, api_path) + URL_PATH_SEPARATOR
