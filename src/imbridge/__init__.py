"""
imbridge - 统一的企业 IM 消息与通讯录适配层

一套接口对接企业微信、钉钉、飞书。
"""


def _resolve_version() -> str:
    """
    解析版本号。

    优先读取源码根目录的 pyproject.toml（editable 安装时始终最新），
    否则回退到已安装包的元数据。
    """
    from pathlib import Path

    version = "0.0.0-dev"

    project_root = Path(__file__).parent.parent.parent
    pyproject_path = project_root / "pyproject.toml"
    if pyproject_path.exists():
        try:
            import tomllib

            with open(pyproject_path, "rb") as f:
                return tomllib.load(f)["project"]["version"]
        except (OSError, KeyError, ValueError):
            pass

    try:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as meta_version

        version = meta_version("imbridge")
    except PackageNotFoundError:
        pass

    return version


__version__ = _resolve_version()
__author__ = "imbridge"
