"""
Block Routes

Block placement, rendering and the row editor API. Editing goes through a
session: open it, add/remove rows against its working copy, then save.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from sitewidgets.auth import require_admin
from sitewidgets.database import get_db
from sitewidgets.models.block import BlockInstance
from sitewidgets.schemas.blocks import (
    BlockCreate,
    BlockRender,
    BlockResponse,
    EditSessionOpen,
    RowsSubmission,
    SaveSubmission,
    WorkingCopyResponse,
)
from sitewidgets.services.asset_promoter import AssetPromoter
from sitewidgets.services.block_service import BlockService
from sitewidgets.services.file_service import DatabaseFileStorage
from sitewidgets.services.row_editor import RowEditor
from sitewidgets.services.working_copy_store import WorkingCopy, get_working_copy_store

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_row_editor(
    db: AsyncSession = Depends(get_db),
    store=Depends(get_working_copy_store),
) -> RowEditor:
    return RowEditor(store, AssetPromoter(DatabaseFileStorage(db)))


def _working_copy_response(working: WorkingCopy, service: BlockService, block: BlockInstance) -> WorkingCopyResponse:
    plugin = service.plugin_for(block.plugin_id)
    return WorkingCopyResponse(
        session_id=working.session_id,
        block_id=working.block_id,
        parent_session_id=working.parent_session_id,
        status=working.status.value,
        rows=working.rows,
        max_rows=plugin.row_spec.max_rows if plugin.row_spec else None,
    )


@router.post("", response_model=BlockResponse, status_code=status.HTTP_201_CREATED)
async def create_block(
    payload: BlockCreate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    return await BlockService(db).create(payload.plugin_id, payload.label, payload.settings)


@router.get("", response_model=list[BlockResponse])
async def list_blocks(
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    return await BlockService(db).list_blocks()


@router.get("/{block_id}", response_model=BlockResponse)
async def get_block(
    block_id: int,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    return await BlockService(db).get(block_id)


@router.get("/{block_id}/render", response_model=BlockRender)
async def render_block(block_id: int, db: AsyncSession = Depends(get_db)):
    """Public render context of a saved block."""
    service = BlockService(db)
    block = await service.get(block_id)
    return BlockRender(id=block.id, plugin_id=block.plugin_id, context=service.render(block))


@router.post("/{block_id}/edit-sessions", response_model=WorkingCopyResponse, status_code=status.HTTP_201_CREATED)
async def open_edit_session(
    block_id: int,
    payload: EditSessionOpen,
    db: AsyncSession = Depends(get_db),
    editor: RowEditor = Depends(get_row_editor),
    admin: dict = Depends(require_admin),
):
    service = BlockService(db)
    block = await service.get(block_id)
    working = await editor.open(
        block.id,
        service.plugin_for(block.plugin_id),
        service.configuration(block),
        session_id=payload.session_id,
        parent_session_id=payload.parent_session_id,
        submitted_rows=payload.rows,
    )
    return _working_copy_response(working, service, block)


@router.get("/{block_id}/edit-sessions/{session_id}", response_model=WorkingCopyResponse)
async def get_edit_session(
    block_id: int,
    session_id: str,
    db: AsyncSession = Depends(get_db),
    editor: RowEditor = Depends(get_row_editor),
    admin: dict = Depends(require_admin),
):
    service = BlockService(db)
    block = await service.get(block_id)
    working = await editor.open(
        block.id, service.plugin_for(block.plugin_id), service.configuration(block), session_id=session_id
    )
    return _working_copy_response(working, service, block)


@router.post("/{block_id}/edit-sessions/{session_id}/rows", response_model=WorkingCopyResponse)
async def add_row(
    block_id: int,
    session_id: str,
    db: AsyncSession = Depends(get_db),
    editor: RowEditor = Depends(get_row_editor),
    admin: dict = Depends(require_admin),
):
    service = BlockService(db)
    block = await service.get(block_id)
    working = await editor.add_row(
        block.id, service.plugin_for(block.plugin_id), service.configuration(block), session_id
    )
    return _working_copy_response(working, service, block)


@router.delete("/{block_id}/edit-sessions/{session_id}/rows/{index}", response_model=WorkingCopyResponse)
async def remove_row(
    block_id: int,
    session_id: str,
    index: int,
    db: AsyncSession = Depends(get_db),
    editor: RowEditor = Depends(get_row_editor),
    admin: dict = Depends(require_admin),
):
    service = BlockService(db)
    block = await service.get(block_id)
    working = await editor.remove_row(
        block.id, service.plugin_for(block.plugin_id), service.configuration(block), session_id, index
    )
    return _working_copy_response(working, service, block)


@router.post("/{block_id}/edit-sessions/{session_id}/remove-selected", response_model=WorkingCopyResponse)
async def remove_selected_rows(
    block_id: int,
    session_id: str,
    payload: RowsSubmission,
    db: AsyncSession = Depends(get_db),
    editor: RowEditor = Depends(get_row_editor),
    admin: dict = Depends(require_admin),
):
    service = BlockService(db)
    block = await service.get(block_id)
    working = await editor.remove_selected(
        block.id, service.plugin_for(block.plugin_id), service.configuration(block), session_id, payload.rows
    )
    return _working_copy_response(working, service, block)


@router.post("/{block_id}/edit-sessions/{session_id}/save", response_model=BlockResponse)
async def save_block(
    block_id: int,
    session_id: str,
    payload: SaveSubmission,
    db: AsyncSession = Depends(get_db),
    editor: RowEditor = Depends(get_row_editor),
    admin: dict = Depends(require_admin),
):
    """Persist the working copy and the scalar settings in one transaction."""
    service = BlockService(db)
    block = await service.get(block_id)
    plugin = service.plugin_for(block.plugin_id)
    config = service.configuration(block)

    # Settings left out of the payload keep their stored values
    submitted_settings = {**plugin.settings_values(config), **payload.settings}

    await editor.save(
        block.id,
        plugin,
        config,
        session_id,
        payload.rows,
        submitted_settings,
        service.persister(block),
    )
    return block
