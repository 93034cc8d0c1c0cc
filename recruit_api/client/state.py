"""Client-side state containers.

Each container owns one slice of UI state and exposes actions that call the
API and store the result. Fetch actions reset their slice to its empty value
when the call fails; write actions log the failure, leave state untouched and
return False. ``AppContext`` composes every container over one ``ApiClient``
so they share the login cookie.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from recruit_api.client.api import ApiClient
from recruit_api.client.board import build_board, users_available_to_add

logger = logging.getLogger(__name__)


class UserState:
    def __init__(self, api: ApiClient) -> None:
        self.api = api
        self.user: Dict[str, Any] = {}
        self.found_users: List[Dict[str, Any]] = []

    def fetch_user(self) -> None:
        try:
            self.user = self.api.get("/user") or {}
        except httpx.HTTPError as e:
            logger.info("fetch_user failed: %s", e)
            self.user = {}

    def register(self, username: str, password: str, **profile: Optional[str]) -> bool:
        try:
            self.api.post("/user/register", json={"username": username, "password": password, **profile})
        except httpx.HTTPError as e:
            logger.error("register failed: %s", e)
            return False
        return self.login(username, password)

    def login(self, username: str, password: str) -> bool:
        try:
            self.api.post("/user/login", json={"username": username, "password": password})
        except httpx.HTTPError as e:
            logger.error("login failed: %s", e)
            self.user = {}
            return False
        self.fetch_user()
        return bool(self.user)

    def logout(self) -> None:
        try:
            self.api.post("/user/logout")
        except httpx.HTTPError as e:
            logger.error("logout failed: %s", e)
        self.user = {}

    def search(self, term: str) -> None:
        try:
            self.found_users = self.api.get("/user/search", params={"term": term}) or []
        except httpx.HTTPError as e:
            logger.error("user search failed: %s", e)
            self.found_users = []


class PipelineState:
    def __init__(self, api: ApiClient) -> None:
        self.api = api
        self.pipelines: List[Dict[str, Any]] = []
        self.selected_pipeline_id: Optional[int] = None
        self.statuses: List[Dict[str, Any]] = []
        self.rows: List[Dict[str, Any]] = []
        self.board: List[Dict[str, Any]] = []

    def fetch_pipelines(self) -> None:
        try:
            self.pipelines = self.api.get("/pipeline") or []
        except httpx.HTTPError as e:
            logger.error("fetch_pipelines failed: %s", e)
            self.pipelines = []

    def fetch_pipeline_by_id(self, pipeline_id: int) -> None:
        self.selected_pipeline_id = pipeline_id
        try:
            self.statuses = self.api.get(f"/pipeline/{pipeline_id}/status") or []
            self.rows = self.api.get(f"/pipeline/{pipeline_id}") or []
        except httpx.HTTPError as e:
            logger.error("fetch_pipeline_by_id failed for %s: %s", pipeline_id, e)
            self.statuses, self.rows, self.board = [], [], []
            return
        self.board = build_board(self.statuses, self.rows)

    def _refresh_selected(self) -> None:
        if self.selected_pipeline_id is not None:
            self.fetch_pipeline_by_id(self.selected_pipeline_id)

    def add_pipeline(self, name: str) -> bool:
        try:
            self.api.post("/pipeline", json={"name": name})
        except httpx.HTTPError as e:
            logger.error("add_pipeline failed: %s", e)
            return False
        self.fetch_pipelines()
        return True

    def add_status(self, name: str, order: Optional[int] = None) -> bool:
        if self.selected_pipeline_id is None:
            return False
        body = {"pipeline_id": self.selected_pipeline_id, "name": name, "order": order}
        try:
            self.api.post("/pipeline/status", json=body)
        except httpx.HTTPError as e:
            logger.error("add_status failed: %s", e)
            return False
        self._refresh_selected()
        return True

    def add_user_status(self, user_id: int, pipeline_status_id: int) -> bool:
        try:
            self.api.post("/pipeline/user_status", json={"user_id": user_id, "p_s_id": pipeline_status_id})
        except httpx.HTTPError as e:
            logger.error("add_user_status failed: %s", e)
            return False
        self._refresh_selected()
        return True

    def move_user(self, user_id: int, pipeline_status_id: int) -> bool:
        try:
            self.api.put(f"/pipeline/user_status/{user_id}", json={"pipeline_status_id": pipeline_status_id})
        except httpx.HTTPError as e:
            logger.error("move_user failed: %s", e)
            return False
        self._refresh_selected()
        return True

    def remove_user(self, user_id: int) -> bool:
        if self.selected_pipeline_id is None:
            return False
        body = {"user_id": user_id, "pipeline_id": self.selected_pipeline_id}
        try:
            self.api.put("/pipeline/user_status/remove", json=body)
        except httpx.HTTPError as e:
            logger.error("remove_user failed: %s", e)
            return False
        self._refresh_selected()
        return True


class FormState:
    def __init__(self, api: ApiClient) -> None:
        self.api = api
        self.forms: List[Dict[str, Any]] = []
        self.selected_form: Dict[str, Any] = {}

    def fetch_forms(self) -> None:
        try:
            self.forms = self.api.get("/form") or []
        except httpx.HTTPError as e:
            logger.error("fetch_forms failed: %s", e)
            self.forms = []

    def fetch_form(self, form_id: int) -> None:
        try:
            self.selected_form = self.api.get(f"/form/{form_id}/all") or {}
        except httpx.HTTPError as e:
            logger.error("fetch_form failed for %s: %s", form_id, e)
            self.selected_form = {}

    def add_form(self, name: str) -> Optional[int]:
        try:
            created = self.api.post("/form", json={"name": name})
        except httpx.HTTPError as e:
            logger.error("add_form failed: %s", e)
            return None
        self.fetch_forms()
        return int(created["id"])

    def save_form(self, form_id: int, new_form: Dict[str, Any]) -> bool:
        body = {"OldForm": self.selected_form, "NewForm": new_form}
        try:
            self.api.put(f"/form/{form_id}", json=body)
        except httpx.HTTPError as e:
            logger.error("save_form failed for %s: %s", form_id, e)
            return False
        self.fetch_form(form_id)
        return True


class SectionState:
    def __init__(self, api: ApiClient) -> None:
        self.api = api
        self.sections: List[Dict[str, Any]] = []

    def fetch_sections(self, form_id: int) -> None:
        try:
            self.sections = self.api.get(f"/form/{form_id}/sections") or []
        except httpx.HTTPError as e:
            logger.error("fetch_sections failed for %s: %s", form_id, e)
            self.sections = []

    def add_section(self, form_id: int, name: str, description: Optional[str] = None) -> bool:
        try:
            self.api.post(f"/form/{form_id}/sections", json={"name": name, "description": description})
        except httpx.HTTPError as e:
            logger.error("add_section failed: %s", e)
            return False
        self.fetch_sections(form_id)
        return True


class SubmissionState:
    def __init__(self, api: ApiClient) -> None:
        self.api = api
        self.submission: Dict[str, Any] = {}

    def open_submission(self, form_id: int) -> None:
        """Create or fetch the caller's submission for ``form_id``."""
        try:
            self.submission = self.api.post("/submission", json={"form_id": form_id}) or {}
        except httpx.HTTPError as e:
            logger.error("open_submission failed for form %s: %s", form_id, e)
            self.submission = {}

    def fetch_submission(self, submission_id: int) -> None:
        try:
            self.submission = self.api.get(f"/submission/{submission_id}") or {}
        except httpx.HTTPError as e:
            logger.error("fetch_submission failed for %s: %s", submission_id, e)
            self.submission = {}

    def save_answers(self, answers: List[Dict[str, Any]]) -> bool:
        submission_id = self.submission.get("id")
        if submission_id is None:
            return False
        try:
            self.api.put(f"/submission/{submission_id}/answers", json={"answers": answers})
        except httpx.HTTPError as e:
            logger.error("save_answers failed for %s: %s", submission_id, e)
            return False
        self.fetch_submission(submission_id)
        return True


class AppContext:
    """Root container; every slice talks to the API through one client."""

    def __init__(self, api: ApiClient) -> None:
        self.api = api
        self.users = UserState(api)
        self.pipelines = PipelineState(api)
        self.forms = FormState(api)
        self.sections = SectionState(api)
        self.submissions = SubmissionState(api)

    def users_available_to_add(self) -> List[Dict[str, Any]]:
        return list(users_available_to_add(self.users.found_users, self.pipelines.board))


__all__ = [
    "AppContext",
    "UserState",
    "PipelineState",
    "FormState",
    "SectionState",
    "SubmissionState",
]
