"""Admin API: token-protected CRUD over groups, products, topics and articles."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from .auth import require_admin_token
from .responses import current_store, json_error, query_flag

admin_api = Blueprint("admin_api", __name__)


def _json_object():
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else None


@admin_api.route("/groups", methods=["GET"])
@require_admin_token
def list_groups():
    return jsonify({"groups": current_store().groups.list()})


@admin_api.route("/groups", methods=["POST"])
@require_admin_token
def create_group():
    payload = _json_object()
    if payload is None:
        return json_error("Expected a JSON object.", 400)
    folder, group = current_store().groups.create(payload)
    return jsonify({"status": "ok", "message": "Group created successfully", "group": group, "groupId": folder})


@admin_api.route("/groups/<group_id>", methods=["GET"])
@require_admin_token
def get_group(group_id: str):
    return jsonify({"group": current_store().groups.get(group_id)})


@admin_api.route("/groups/<group_id>", methods=["PUT"])
@require_admin_token
def update_group(group_id: str):
    payload = _json_object()
    if payload is None:
        return json_error("Expected a JSON object.", 400)
    group = current_store().groups.update(group_id, payload)
    return jsonify({"status": "ok", "message": "Group updated successfully", "group": group})


@admin_api.route("/groups/<group_id>/<any(incidents, popups, contact):kind>", methods=["GET"])
@require_admin_token
def get_group_document(group_id: str, kind: str):
    return jsonify({"data": current_store().groups.document(group_id, kind)})


@admin_api.route("/groups/<group_id>/<any(incidents, popups, contact):kind>", methods=["PUT"])
@require_admin_token
def replace_group_document(group_id: str, kind: str):
    payload = _json_object()
    if payload is None or "data" not in payload:
        return json_error("No data provided", 400)
    data = current_store().groups.replace_document(group_id, kind, payload["data"])
    return jsonify({"status": "ok", "message": "File updated successfully", "data": data})


@admin_api.route("/groups/<group_id>/verify", methods=["GET"])
@require_admin_token
def verify_group(group_id: str):
    return jsonify(current_store().auditor.verify(group_id))


@admin_api.route("/groups/<group_id>/repair", methods=["POST"])
@require_admin_token
def repair_group(group_id: str):
    report = current_store().auditor.repair(group_id)
    return jsonify({"status": "ok", **report})


@admin_api.route("/groups/<group_id>/products", methods=["GET"])
@require_admin_token
def list_products(group_id: str):
    return jsonify({"products": current_store().products.list(group_id)})


@admin_api.route("/groups/<group_id>/products", methods=["POST"])
@require_admin_token
def create_product(group_id: str):
    payload = _json_object()
    if payload is None:
        return json_error("Expected a JSON object.", 400)
    folder, product = current_store().products.create(group_id, payload)
    return jsonify(
        {
            "status": "ok",
            "message": "Product created successfully",
            "product": product,
            "productFolderId": folder,
        }
    )


@admin_api.route("/groups/<group_id>/products/<product_folder_id>", methods=["GET"])
@require_admin_token
def get_product(group_id: str, product_folder_id: str):
    return jsonify({"product": current_store().products.get(group_id, product_folder_id)})


@admin_api.route("/groups/<group_id>/products/<product_folder_id>", methods=["PUT"])
@require_admin_token
def update_product(group_id: str, product_folder_id: str):
    payload = _json_object()
    if payload is None:
        return json_error("Expected a JSON object.", 400)
    product = current_store().products.update(group_id, product_folder_id, payload)
    return jsonify({"status": "ok", "message": "Product updated successfully", "product": product})


@admin_api.route("/groups/<group_id>/products/<product_folder_id>", methods=["DELETE"])
@require_admin_token
def delete_product(group_id: str, product_folder_id: str):
    current_store().products.delete(group_id, product_folder_id)
    return jsonify({"status": "ok", "message": "Product deleted successfully"})


@admin_api.route("/groups/<group_id>/products/<product_folder_id>/topics", methods=["GET"])
@require_admin_token
def list_topics(group_id: str, product_folder_id: str):
    topics = current_store().topics.list(group_id, product_folder_id)
    return jsonify({"data": {"supportHubs": topics}})


@admin_api.route("/groups/<group_id>/products/<product_folder_id>/topics", methods=["PUT"])
@require_admin_token
def reconcile_topics(group_id: str, product_folder_id: str):
    payload = _json_object()
    if payload is None:
        return json_error("Invalid data format", 400)
    # The admin UI wraps the list in `data`; bare bodies are accepted too.
    body = payload.get("data") if isinstance(payload.get("data"), dict) else payload
    support_hubs = body.get("supportHubs")
    if not isinstance(support_hubs, list):
        return json_error("Invalid data format", 400)
    topic_ids = current_store().topics.reconcile(group_id, product_folder_id, support_hubs)
    return jsonify({"status": "ok", "message": "Topics updated successfully", "topicIds": topic_ids})


@admin_api.route("/groups/<group_id>/products/<product_folder_id>/topics/<topic_folder_id>", methods=["GET"])
@require_admin_token
def get_topic(group_id: str, product_folder_id: str, topic_folder_id: str):
    return jsonify({"topic": current_store().topics.get(group_id, product_folder_id, topic_folder_id)})


@admin_api.route(
    "/groups/<group_id>/products/<product_folder_id>/topics/<topic_folder_id>/articles", methods=["GET"]
)
@require_admin_token
def get_topic_articles(group_id: str, product_folder_id: str, topic_folder_id: str):
    topics = current_store().topics
    if query_flag("resolve"):
        articles = topics.resolved_articles(group_id, product_folder_id, topic_folder_id)
    else:
        articles = topics.articles(group_id, product_folder_id, topic_folder_id)
    return jsonify({"articles": articles})


@admin_api.route(
    "/groups/<group_id>/products/<product_folder_id>/topics/<topic_folder_id>/articles", methods=["PUT"]
)
@require_admin_token
def replace_topic_articles(group_id: str, product_folder_id: str, topic_folder_id: str):
    payload = _json_object()
    if payload is None:
        return json_error("Expected a JSON object.", 400)
    articles = current_store().topics.replace_articles(
        group_id, product_folder_id, topic_folder_id, payload.get("articles")
    )
    return jsonify({"status": "ok", "articles": articles})


@admin_api.route(
    "/groups/<group_id>/products/<product_folder_id>/topics/<topic_folder_id>/<any(videos, training):kind>",
    methods=["GET"],
)
@require_admin_token
def get_topic_document(group_id: str, product_folder_id: str, topic_folder_id: str, kind: str):
    return jsonify({kind: current_store().topics.document(group_id, product_folder_id, topic_folder_id, kind)})


@admin_api.route("/groups/<group_id>/products/<product_folder_id>/articles", methods=["GET"])
@require_admin_token
def product_articles(group_id: str, product_folder_id: str):
    articles = current_store().products.articles(group_id, product_folder_id)
    return jsonify({"data": {"articles": articles}})


@admin_api.route("/groups/<group_id>/products/<product_folder_id>/release-notes", methods=["GET"])
@require_admin_token
def get_release_notes(group_id: str, product_folder_id: str):
    return jsonify({"releaseNotes": current_store().products.release_notes(group_id, product_folder_id)})


@admin_api.route("/groups/<group_id>/products/<product_folder_id>/release-notes", methods=["PUT"])
@require_admin_token
def replace_release_notes(group_id: str, product_folder_id: str):
    payload = _json_object()
    if payload is None:
        return json_error("Expected a JSON object.", 400)
    notes = current_store().products.replace_release_notes(
        group_id, product_folder_id, payload.get("releaseNotes")
    )
    return jsonify({"status": "ok", "releaseNotes": notes})
