"""Parcel REST endpoint specs.

Paths are relative to ``ParcelConfig.api_url``. List endpoints take their
filter under ``params["filter"]`` as a snake_case dict: GET endpoints send it
as kebab-case query parameters, search endpoints as a camelCase JSON body.
"""

from __future__ import annotations

from typing import Any

from ..runtime.rest import RestEndpointSpec
from ..utils.casing import to_json_body, to_query_params


def _document_path(params: dict[str, Any]) -> str:
    return f"documents/{params['document_id']}"


def _identity_path(params: dict[str, Any]) -> str:
    return f"identities/{params['identity_id']}"


def _filter_query(params: dict[str, Any]) -> list[tuple[str, str]]:
    return to_query_params(params.get("filter") or {})


def _filter_body(params: dict[str, Any]) -> dict[str, Any]:
    return to_json_body(params.get("filter") or {})


def get_document_spec() -> RestEndpointSpec:
    return RestEndpointSpec(id="get_document", method="GET", build_path=_document_path)


def update_document_spec() -> RestEndpointSpec:
    return RestEndpointSpec(
        id="update_document",
        method="PUT",
        build_path=_document_path,
        build_body=lambda params: to_json_body(params["update"]),
    )


def delete_document_spec() -> RestEndpointSpec:
    return RestEndpointSpec(
        id="delete_document",
        method="DELETE",
        build_path=_document_path,
        expected_status=(204,),
    )


def search_documents_spec() -> RestEndpointSpec:
    return RestEndpointSpec(
        id="search_documents",
        method="POST",
        build_path=lambda _: "documents/search",
        build_body=_filter_body,
    )


def document_history_spec() -> RestEndpointSpec:
    return RestEndpointSpec(
        id="document_history",
        method="GET",
        build_path=lambda params: f"{_document_path(params)}/history",
        build_query=_filter_query,
    )


def current_identity_spec() -> RestEndpointSpec:
    # Usually answered with a 307 to the caller's own identity
    return RestEndpointSpec(
        id="current_identity", method="GET", build_path=lambda _: "identities/me"
    )


def get_identity_spec() -> RestEndpointSpec:
    return RestEndpointSpec(id="get_identity", method="GET", build_path=_identity_path)


def granted_permissions_spec() -> RestEndpointSpec:
    return RestEndpointSpec(
        id="granted_permissions",
        method="GET",
        build_path=lambda params: f"{_identity_path(params)}/permissions",
        build_query=_filter_query,
    )
