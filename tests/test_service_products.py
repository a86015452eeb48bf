"""Tests for services/products.py — upstream endpoints, status handling, reshaping."""
from unittest.mock import MagicMock

import httpx
import pytest

from catalog_proxy.services.products import ProductService, build_service
from catalog_proxy.transform import ProductTransformer
from catalog_proxy.utils.errors import InvalidPayload, UpstreamRejected


def _resp(status_code=200, json_data=None, text="", content=b"x"):
    r = MagicMock(spec=httpx.Response)
    r.status_code = status_code
    r.text = text
    r.content = content
    r.json.return_value = json_data if json_data is not None else {}
    return r


@pytest.fixture
def service(mock_client):
    return ProductService(mock_client, ProductTransformer())


# ── list ─────────────────────────────────────────────────────────────

def test_list_calls_admin_products_with_query(service, mock_client):
    mock_client.get.return_value = _resp(200, {"products": []})
    service.list("page=2&limit=5")
    mock_client.get.assert_called_once_with("/admin/products", params="page=2&limit=5")


def test_list_returns_canonical_envelope(service, mock_client):
    mock_client.get.return_value = _resp(200, {
        "success": True,
        "data": {
            "products": [{"_id": "a1", "name": "Bolo", "images": [{"url": "u1"}]}],
            "pagination": {"currentPage": 1, "limit": 10, "totalProducts": 1},
        },
    })
    result = service.list()
    assert result.status_code == 200
    assert result.body["data"][0]["id"] == "a1"
    assert result.body["data"][0]["images"] == ["u1"]
    assert result.body["pagination"] == {"page": 1, "limit": 10, "total": 1, "totalPages": 1}


def test_list_upstream_error_raises(service, mock_client):
    mock_client.get.return_value = _resp(503, {"message": "maintenance"})
    with pytest.raises(UpstreamRejected) as exc_info:
        service.list()
    assert exc_info.value.status_code == 503
    assert exc_info.value.body == {"message": "maintenance"}


# ── get ──────────────────────────────────────────────────────────────

def test_get_calls_product_path(service, mock_client):
    mock_client.get.return_value = _resp(200, {"data": {"_id": "p9"}})
    result = service.get("p9")
    mock_client.get.assert_called_once_with("/admin/products/p9")
    assert result.body["id"] == "p9"


def test_product_id_is_path_escaped(service, mock_client):
    mock_client.get.return_value = _resp(200, {"id": "a/b"})
    service.get("a/b")
    mock_client.get.assert_called_once_with("/admin/products/a%2Fb")


# ── create ───────────────────────────────────────────────────────────

def test_create_posts_transformed_payload(service, mock_client):
    mock_client.post.return_value = _resp(201, {"data": {"productId": "n1", "name": "A"}})
    result = service.create({"name": "A", "description": "B", "price": 10, "stockQuantity": 5})

    mock_client.post.assert_called_once()
    path = mock_client.post.call_args[0][0]
    body = mock_client.post.call_args[1]["body"]
    assert path == "/admin/products"
    assert body["isActive"] is True
    assert body["images"] == []
    assert result.status_code == 201
    assert result.body["id"] == "n1"


def test_create_invalid_payload_never_calls_upstream(service, mock_client):
    with pytest.raises(InvalidPayload):
        service.create({"name": "A"})
    mock_client.post.assert_not_called()


def test_create_rejected_passes_status(service, mock_client):
    mock_client.post.return_value = _resp(422, {"message": "name already used"})
    with pytest.raises(UpstreamRejected) as exc_info:
        service.create({"name": "A", "description": "B", "price": 10, "stockQuantity": 5})
    assert exc_info.value.status_code == 422


# ── update ───────────────────────────────────────────────────────────

def test_update_sends_only_set_fields(service, mock_client):
    mock_client.put.return_value = _resp(200, {"data": {"_id": "p1", "price": 12}})
    result = service.update("p1", {"price": 12})

    mock_client.put.assert_called_once_with("/admin/products/p1", body={"price": 12})
    assert result.body["price"] == 12


def test_update_empty_response_passed_through(service, mock_client):
    mock_client.put.return_value = _resp(204, content=b"")
    result = service.update("p1", {"price": 12})
    assert result.status_code == 204
    assert result.body is None


def test_update_message_only_response_passed_through(service, mock_client):
    mock_client.put.return_value = _resp(200, {"success": True, "message": "Product updated"})
    result = service.update("p1", {"price": 12})
    assert result.status_code == 200
    assert result.body == {"success": True, "message": "Product updated"}


def test_create_message_only_response_passed_through(service, mock_client):
    mock_client.post.return_value = _resp(201, {"message": "Created"})
    result = service.create({"name": "A", "description": "B", "price": 10, "stockQuantity": 5})
    assert result.body == {"message": "Created"}


# ── delete ───────────────────────────────────────────────────────────

def test_delete_calls_product_path(service, mock_client):
    mock_client.delete.return_value = _resp(200, {"success": True, "message": "deleted"})
    result = service.delete("p1")
    mock_client.delete.assert_called_once_with("/admin/products/p1")
    assert result.body == {"success": True, "message": "deleted"}


def test_delete_no_content(service, mock_client):
    mock_client.delete.return_value = _resp(204, content=b"")
    result = service.delete("p1")
    assert result.status_code == 204
    assert result.body is None


def test_delete_text_body(service, mock_client):
    resp = _resp(200, text="Deleted")
    resp.json.side_effect = ValueError("not json")
    mock_client.delete.return_value = resp
    assert service.delete("p1").body == "Deleted"


def test_delete_missing_product(service, mock_client):
    mock_client.delete.return_value = _resp(404, {"message": "Product not found"})
    with pytest.raises(UpstreamRejected) as exc_info:
        service.delete("missing")
    assert exc_info.value.status_code == 404


# ── wiring ───────────────────────────────────────────────────────────

def test_build_service_wires_aliases(fake_config):
    client, service = build_service(fake_config)
    try:
        assert isinstance(service, ProductService)
        assert client._auth.cache.get() is None
    finally:
        client.close()
