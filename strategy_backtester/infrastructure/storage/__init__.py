from .json_result_store import JSONResultStore

__all__ = ["JSONResultStore"]
