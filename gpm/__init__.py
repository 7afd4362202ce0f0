"""gpm - Go 依赖版本钉扎工具"""

__version__ = "1.4.0"
