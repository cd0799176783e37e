from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session, sessionmaker
from starlette.responses import Response
from app.core.config import settings
from app.core.logging import get_logger
from app.core.templates import render
from app.db.session import get_session_factory
from app.services.author_service import AuthorService, AuthorFormResult
from app.schemas.author import AuthorFormData
from typing import Annotated
import uuid
from starlette.status import (
    HTTP_302_FOUND,
    HTTP_303_SEE_OTHER,
)
router = APIRouter(tags=["authors"])

SessionFactoryDep = Annotated[sessionmaker[Session], Depends(get_session_factory)]

AUTHOR_LIST_URL = f"{settings.CATALOG_PREFIX}/authors"


def _form_page(request: Request, title: str, result: AuthorFormResult) -> Response:
    return render(
        request,
        "author_form.html",
        {"title": title, "author": result.form, "errors": result.errors},
    )


@router.get("/authors")
async def author_list(request: Request, session_factory: SessionFactoryDep):
    logger = get_logger(__name__, request)
    logger.info("Listing authors")
    authors = await AuthorService.list_authors(session_factory)
    return render(
        request, "author_list.html", {"title": "Author List", "author_list": authors}
    )


# Registered before /author/{author_id} so "create" is not read as an id.
@router.get("/author/create")
async def author_create_get(request: Request):
    return render(
        request, "author_form.html", {"title": "Create Author", "author": AuthorFormData()}
    )


@router.post("/author/create")
async def author_create_post(request: Request, session_factory: SessionFactoryDep):
    logger = get_logger(__name__, request)
    form = await request.form()
    result = await AuthorService.create_author(session_factory, form)
    if result.author is None:
        logger.info("Author form rejected", extra={"errors": len(result.errors)})
        return _form_page(request, "Create Author", result)

    logger.info("Created author %s", result.author.id)
    return RedirectResponse(result.author.url, status_code=HTTP_303_SEE_OTHER)


@router.get("/author/{author_id}")
async def author_detail(
    request: Request, author_id: uuid.UUID, session_factory: SessionFactoryDep
):
    detail = await AuthorService.get_author_detail(session_factory, author_id)
    return render(
        request,
        "author_detail.html",
        {
            "title": "Author Detail",
            "author": detail.author,
            "authors_books": detail.authors_books,
        },
    )


@router.get("/author/{author_id}/delete")
async def author_delete_get(
    request: Request, author_id: uuid.UUID, session_factory: SessionFactoryDep
):
    state = await AuthorService.get_author_for_delete(session_factory, author_id)
    if state is None:
        return RedirectResponse(AUTHOR_LIST_URL, status_code=HTTP_302_FOUND)

    return render(
        request,
        "author_delete.html",
        {"title": "Delete Author", "author": state.author, "author_books": state.author_books},
    )


@router.post("/author/{author_id}/delete")
async def author_delete_post(
    request: Request,
    author_id: uuid.UUID,
    authorid: Annotated[uuid.UUID, Form()],
    session_factory: SessionFactoryDep,
):
    logger = get_logger(__name__, request)
    if authorid != author_id:
        logger.warning("Delete form authorid %s differs from path id %s", authorid, author_id)

    state = await AuthorService.delete_author(session_factory, authorid)
    if not state.deleted:
        logger.info("Author %s still has %d books, not deleted", authorid, len(state.author_books))
        return render(
            request,
            "author_delete.html",
            {"title": "Delete Author", "author": state.author, "author_books": state.author_books},
        )

    logger.info("Deleted author %s", authorid)
    return RedirectResponse(AUTHOR_LIST_URL, status_code=HTTP_303_SEE_OTHER)


@router.get("/author/{author_id}/update")
async def author_update_get(
    request: Request, author_id: uuid.UUID, session_factory: SessionFactoryDep
):
    author = await AuthorService.get_author_for_update(session_factory, author_id)
    return render(
        request,
        "author_form.html",
        {"title": "Update Author", "author": AuthorFormData.from_author(author)},
    )


@router.post("/author/{author_id}/update")
async def author_update_post(
    request: Request, author_id: uuid.UUID, session_factory: SessionFactoryDep
):
    logger = get_logger(__name__, request)
    form = await request.form()
    result = await AuthorService.update_author(session_factory, author_id, form)
    if result.author is None:
        logger.info("Author form rejected", extra={"errors": len(result.errors)})
        return _form_page(request, "Update Author", result)

    logger.info("Updated author %s", result.author.id)
    return RedirectResponse(result.author.url, status_code=HTTP_303_SEE_OTHER)
