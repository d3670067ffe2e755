"""
imbridge 包入口点 - 支持 `python -m imbridge` 调用
"""

from imbridge.main import app

if __name__ == "__main__":
    app()
