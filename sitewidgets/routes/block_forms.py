"""
Block Editing Form

Server-rendered admin form for a block. The rows table grows and shrinks
through the ``add_row`` and ``remove_selected`` actions; requests sent by
HTMX (``HX-Request: true``) get back only the table fragment.
"""

import logging
import re
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from sitewidgets.auth import require_admin
from sitewidgets.blocks.base import BlockPlugin
from sitewidgets.database import get_db
from sitewidgets.exceptions import AssetPromotionError, InvalidOperationError, ValidationError
from sitewidgets.models.block import BlockInstance
from sitewidgets.routes.blocks import get_row_editor
from sitewidgets.services.block_service import BlockService
from sitewidgets.services.row_editor import RowEditor

logger = logging.getLogger(__name__)

router = APIRouter()

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

ROW_INPUT = re.compile(r"^rows-(\d+)-(\w+)$")
SETTING_PREFIX = "settings-"


def parse_rows(form) -> list[dict[str, Any]] | None:
    """Collect ``rows-<index>-<field>`` inputs into an ordered row list."""
    by_index: dict[int, dict[str, Any]] = {}
    for key, value in form.multi_items():
        match = ROW_INPUT.match(key)
        if match:
            by_index.setdefault(int(match.group(1)), {})[match.group(2)] = value
    if not by_index:
        return None
    return [by_index.get(index, {}) for index in range(max(by_index) + 1)]


def parse_settings(form, plugin: BlockPlugin) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for setting in plugin.settings_fields:
        key = SETTING_PREFIX + setting.name
        if setting.kind == "bool":
            values[setting.name] = key in form
        elif key in form:
            values[setting.name] = form.get(key)
    return values


def is_partial(request: Request) -> bool:
    return request.headers.get("HX-Request", "").lower() == "true"


def _render(
    request: Request,
    block: BlockInstance,
    plugin: BlockPlugin,
    settings: dict[str, Any],
    rows: list[dict[str, Any]],
    session_id: str | None,
    parent_session_id: str | None,
    errors: dict[str, str] | None = None,
    message: str | None = None,
    partial: bool = False,
    status_code: int = status.HTTP_200_OK,
):
    row_spec = plugin.row_spec
    context = {
        "block": block,
        "plugin": plugin,
        "settings": settings,
        "rows": rows,
        "row_spec": row_spec,
        "can_add": row_spec is not None and (row_spec.max_rows is None or len(rows) < row_spec.max_rows),
        "session_id": session_id or "",
        "parent_session_id": parent_session_id or "",
        "errors": errors or {},
        "message": message,
    }
    template = "admin/_rows_table.html" if partial else "admin/block_form.html"
    return templates.TemplateResponse(request, template, context, status_code=status_code)


@router.get("/{block_id}/edit")
async def edit_block_form(
    request: Request,
    block_id: int,
    session_id: str | None = None,
    parent_session_id: str | None = None,
    db: AsyncSession = Depends(get_db),
    editor: RowEditor = Depends(get_row_editor),
    admin: dict = Depends(require_admin),
):
    service = BlockService(db)
    block = await service.get(block_id)
    plugin = service.plugin_for(block.plugin_id)
    config = service.configuration(block)

    rows: list[dict[str, Any]] = []
    if plugin.row_spec is not None:
        working = await editor.open(
            block.id, plugin, config, session_id=session_id, parent_session_id=parent_session_id
        )
        session_id, rows = working.session_id, working.rows

    return _render(request, block, plugin, plugin.settings_values(config), rows, session_id, parent_session_id)


@router.post("/{block_id}/edit")
async def submit_block_form(
    request: Request,
    block_id: int,
    db: AsyncSession = Depends(get_db),
    editor: RowEditor = Depends(get_row_editor),
    admin: dict = Depends(require_admin),
):
    form = await request.form()
    op = form.get("op", "save")
    session_id = form.get("session_id") or None
    parent_session_id = form.get("parent_session_id") or None

    service = BlockService(db)
    block = await service.get(block_id)
    plugin = service.plugin_for(block.plugin_id)
    config = service.configuration(block)

    submitted_rows = parse_rows(form)
    settings = {**plugin.settings_values(config), **parse_settings(form, plugin)}

    if plugin.row_spec is not None and session_id is None:
        working = await editor.open(
            block.id, plugin, config, parent_session_id=parent_session_id, submitted_rows=submitted_rows
        )
        session_id = working.session_id

    errors: dict[str, str] = {}
    message = None
    status_code = status.HTTP_200_OK

    if op == "add_row" and plugin.row_spec is not None:
        try:
            working = await editor.add_row(block.id, plugin, config, session_id, submitted_rows)
            rows = working.rows
        except InvalidOperationError as e:
            working = await editor.open(block.id, plugin, config, session_id=session_id)
            rows, errors = working.rows, {"rows": e.message}
        return _render(
            request, block, plugin, settings, rows, session_id, parent_session_id,
            errors=errors, partial=is_partial(request),
        )

    if op == "remove_selected" and plugin.row_spec is not None:
        working = await editor.remove_selected(block.id, plugin, config, session_id, submitted_rows or [])
        return _render(
            request, block, plugin, settings, working.rows, session_id, parent_session_id,
            partial=is_partial(request),
        )

    try:
        await editor.save(block.id, plugin, config, session_id, submitted_rows, settings, service.persister(block))
        config = service.configuration(block)
        settings = plugin.settings_values(config)
        message = "The block configuration has been saved."
    except ValidationError as e:
        errors = e.errors
        status_code = status.HTTP_400_BAD_REQUEST
    except AssetPromotionError as e:
        await db.rollback()
        await db.refresh(block)
        errors = {"rows": e.message}
        status_code = e.status_code

    rows = []
    if plugin.row_spec is not None:
        working = await editor.open(block.id, plugin, config, session_id=session_id)
        rows = working.rows if not errors else (submitted_rows or working.rows)

    return _render(
        request, block, plugin, settings, rows, session_id, parent_session_id,
        errors=errors, message=message, status_code=status_code,
    )
