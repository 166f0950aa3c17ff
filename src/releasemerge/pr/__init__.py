"""Release pull request validation and merging."""

from releasemerge.pr.eligibility import is_eligible
from releasemerge.pr.merge import approve_and_merge
from releasemerge.pr.merge_method import select_merge_method
from releasemerge.pr.validate import ValidationFailure, check_file_count, validate, validate_files

__all__ = [
    "ValidationFailure",
    "approve_and_merge",
    "check_file_count",
    "is_eligible",
    "select_merge_method",
    "validate",
    "validate_files",
]
