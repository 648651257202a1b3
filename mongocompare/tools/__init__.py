from .mongo import MongoTool

__all__ = ["MongoTool"]
