from recruit_api.client.api import ApiClient
from recruit_api.client.board import build_board, users_available_to_add
from recruit_api.client.state import (
    AppContext,
    FormState,
    PipelineState,
    SectionState,
    SubmissionState,
    UserState,
)

__all__ = [
    "ApiClient",
    "AppContext",
    "FormState",
    "PipelineState",
    "SectionState",
    "SubmissionState",
    "UserState",
    "build_board",
    "users_available_to_add",
]
