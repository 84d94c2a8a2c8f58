"""effect パラメータのメタ情報と永続化 codec。"""

from .meta import ParamMeta

__all__ = ["ParamMeta"]
