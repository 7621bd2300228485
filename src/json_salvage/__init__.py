from json_salvage.chat import extract_from_chat
from json_salvage.extraction import JSONExtractError, extract_json, repair_json, require_json

__all__ = ["extract_json", "require_json", "repair_json", "extract_from_chat", "JSONExtractError"]
