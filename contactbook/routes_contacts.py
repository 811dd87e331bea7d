# contactbook/routes_contacts.py
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
from starlette import status

from contactbook.auth import current_user_id
from contactbook.csrf import issue_token, require_csrf
from contactbook.database import get_db
from contactbook.errors import InvalidInput
from contactbook.store import ContactStore

router = APIRouter()

FORM_ERROR_STATUS = 422


def get_store(db: Session = Depends(get_db)) -> ContactStore:
    return ContactStore(db)


def render(request: Request, template_name: str, context: Dict[str, Any], status_code: int = 200):
    """Render a page with the caller's username and a fresh form token."""
    uid = request.session.get("uid")
    context = {
        **context,
        "username": request.session.get("username"),
        "csrf_token": issue_token(uid) if uid else "",
    }
    return request.app.state.templates.TemplateResponse(
        request, template_name, context, status_code=status_code
    )


def _back_to_list() -> RedirectResponse:
    return RedirectResponse(url="/contacts", status_code=status.HTTP_303_SEE_OTHER)


# --- List / details ----------------------------------------------------------

@router.get("/contacts")
def contacts_index(
    request: Request,
    uid: str = Depends(current_user_id),
    store: ContactStore = Depends(get_store),
):
    return render(request, "contacts/index.html", {"contacts": store.list(uid)})


# --- Create ------------------------------------------------------------------
# registered before /contacts/{contact_id} so "create" is not read as an id

@router.get("/contacts/create")
def contacts_create_form(request: Request, uid: str = Depends(current_user_id)):
    return render(request, "contacts/form.html", {"mode": "create", "form": {}, "errors": {}})


@router.post("/contacts/create", dependencies=[Depends(require_csrf)])
def contacts_create(
    request: Request,
    name: str = Form(""),
    phone: str = Form(""),
    email: str = Form(""),
    uid: str = Depends(current_user_id),
    store: ContactStore = Depends(get_store),
):
    data = {"name": name, "phone": phone, "email": email}
    try:
        store.create(uid, data)
    except InvalidInput as exc:
        return render(
            request,
            "contacts/form.html",
            {"mode": "create", "form": exc.data, "errors": exc.errors},
            status_code=FORM_ERROR_STATUS,
        )
    return _back_to_list()


@router.get("/contacts/{contact_id}")
def contacts_details(
    request: Request,
    contact_id: int,
    uid: str = Depends(current_user_id),
    store: ContactStore = Depends(get_store),
):
    return render(request, "contacts/details.html", {"contact": store.get(uid, contact_id)})


# --- Edit --------------------------------------------------------------------

@router.get("/contacts/{contact_id}/edit")
def contacts_edit_form(
    request: Request,
    contact_id: int,
    uid: str = Depends(current_user_id),
    store: ContactStore = Depends(get_store),
):
    contact = store.get(uid, contact_id)
    form = {
        "id": contact.id,
        "name": contact.name or "",
        "phone": contact.phone,
        "email": contact.email,
        "version": contact.version,
    }
    return render(request, "contacts/form.html", {"mode": "edit", "form": form, "errors": {}})


@router.post("/contacts/{contact_id}/edit", dependencies=[Depends(require_csrf)])
def contacts_edit(
    request: Request,
    contact_id: int,
    form_id: Optional[str] = Form(None, alias="id"),
    name: str = Form(""),
    phone: str = Form(""),
    email: str = Form(""),
    version: Optional[str] = Form(None),
    uid: str = Depends(current_user_id),
    store: ContactStore = Depends(get_store),
):
    data = {"id": form_id, "name": name, "phone": phone, "email": email, "version": version}
    try:
        store.update(uid, contact_id, data)
    except InvalidInput as exc:
        return render(
            request,
            "contacts/form.html",
            {"mode": "edit", "form": exc.data, "errors": exc.errors},
            status_code=FORM_ERROR_STATUS,
        )
    return _back_to_list()


# --- Delete ------------------------------------------------------------------

@router.get("/contacts/{contact_id}/delete")
def contacts_delete_form(
    request: Request,
    contact_id: int,
    uid: str = Depends(current_user_id),
    store: ContactStore = Depends(get_store),
):
    return render(request, "contacts/delete.html", {"contact": store.get(uid, contact_id)})


@router.post("/contacts/{contact_id}/delete", dependencies=[Depends(require_csrf)])
def contacts_delete(
    contact_id: int,
    uid: str = Depends(current_user_id),
    store: ContactStore = Depends(get_store),
):
    store.delete(uid, contact_id)
    return _back_to_list()
