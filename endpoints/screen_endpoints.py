from __future__ import annotations

import html
import logging

from fastapi import APIRouter, Form
from fastapi.responses import HTMLResponse

from persistence.interfaces import Preferences
from persistence.preferences import KEY_DOC_ID, DiskPreferences
from persistence.repositories import AsyncUserDocumentRepository, AsyncUserRepository
from persistence.user_record import User
from persistence.user_store import build_user_store
from settings import get_settings

router = APIRouter(tags=["screen"])
logger = logging.getLogger(__name__)

SETTINGS = get_settings()

NO_DOC_ID_MESSAGE = "No stored document id. Save first."
NOT_FOUND_MESSAGE = "Document not found."
NOT_CONVERTIBLE_MESSAGE = "Document exists but could not convert to User."


class UserScreenController:
    """
    State and actions behind the user screen.

    Save creates the document under a fresh auto id the first time and remembers
    that id locally; later saves overwrite the same document. Load reads it back.
    Both end by setting `result_text`, which is also returned.
    """

    def __init__(self, repo: AsyncUserRepository, prefs: Preferences) -> None:
        self._repo = repo
        self._prefs = prefs
        self.result_text = ""

    def _show(self, text: str) -> str:
        self.result_text = text
        return text

    def saved_doc_id(self) -> str | None:
        return self._prefs.get_string(KEY_DOC_ID) or None

    async def save(self, name: str = "", email: str = "", score: str = "") -> str:
        doc_id = self.saved_doc_id()
        if doc_id is None:
            return await self._create(name, email, score)

        user = User.from_form(doc_id, name, email, score)
        result = await self._repo.write_user(user)
        if not result.ok:
            logger.warning("Update failed", exc_info=result.error)
            return self._show(f"Update failed: {result.message}")
        logger.info("Updated user %s", doc_id)
        return self._show(f"Updated user {doc_id}")

    async def _create(self, name: str, email: str, score: str) -> str:
        allocated = await self._repo.allocate_id()
        if not allocated.ok or not allocated.value:
            logger.warning("Save failed", exc_info=allocated.error)
            return self._show(f"Save failed: {allocated.message}")
        doc_id = allocated.value

        user = User.from_form(doc_id, name, email, score)
        result = await self._repo.write_user(user)
        if not result.ok:
            logger.warning("Save failed", exc_info=result.error)
            return self._show(f"Save failed: {result.message}")

        # Only remember the id once the document really exists remotely.
        self._prefs.put_string(KEY_DOC_ID, doc_id)
        logger.info("Saved guest user with id: %s", doc_id)
        return self._show(f"Saved user with id: {doc_id}")

    async def load(self) -> str:
        doc_id = self.saved_doc_id()
        if doc_id is None:
            return self._show(NO_DOC_ID_MESSAGE)

        result = await self._repo.read_document(doc_id)
        if not result.ok:
            logger.warning("Read failed", exc_info=result.error)
            return self._show(f"Read failed: {result.message}")
        if result.value is None:
            return self._show(NOT_FOUND_MESSAGE)

        user = User.from_document(result.value)
        if user is None:
            logger.info("Document %s has an unexpected shape", doc_id)
            return self._show(NOT_CONVERTIBLE_MESSAGE)
        return self._show(user.describe())


SCREEN = UserScreenController(
    AsyncUserDocumentRepository(build_user_store(SETTINGS)),
    DiskPreferences(SETTINGS.prefs_scope),
)


def _render_screen(result_text: str, *, name: str = "", email: str = "", score: str = "") -> HTMLResponse:
    esc = html.escape
    return HTMLResponse(
        f"""
<!doctype html>
<html>
  <head><meta charset="utf-8"><title>User Write/Read</title></head>
  <body>
    <h2>User Write/Read</h2>
    <form method="post" action="/save">
      <p><label>Name <input name="name" value="{esc(name)}" /></label></p>
      <p><label>Email <input name="email" type="email" value="{esc(email)}" /></label></p>
      <p><label>Score <input name="score" inputmode="numeric" value="{esc(score)}" /></label></p>
      <button type="submit">Save</button>
      <button type="submit" formaction="/load">Load</button>
    </form>
    <pre id="result">{esc(result_text)}</pre>
  </body>
</html>
""".strip(),
        status_code=200,
    )


@router.get("/")
async def screen_page() -> HTMLResponse:
    return _render_screen(SCREEN.result_text)


@router.post("/save")
async def save_user(
    name: str = Form(""),
    email: str = Form(""),
    score: str = Form(""),
) -> HTMLResponse:
    text = await SCREEN.save(name, email, score)
    return _render_screen(text, name=name, email=email, score=score)


@router.post("/load")
async def load_user(
    name: str = Form(""),
    email: str = Form(""),
    score: str = Form(""),
) -> HTMLResponse:
    # Form values are only echoed back so the fields keep their contents.
    text = await SCREEN.load()
    return _render_screen(text, name=name, email=email, score=score)
