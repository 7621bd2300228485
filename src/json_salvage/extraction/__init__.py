from .extractor import JSONExtractError, extract_json, require_json
from .repair import repair_json
from .scanner import Candidate, scan_candidates

__all__ = ["extract_json", "require_json", "repair_json", "scan_candidates", "Candidate", "JSONExtractError"]
