"""Read-only, country-filtered API consumed by the public help centre."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from .responses import current_store, query_flag

public_api = Blueprint("public_api", __name__)

CACHE_CONTROL = "public, max-age=300, stale-while-revalidate=3600"


@public_api.after_request
def _cache_headers(response):
    response.headers["Cache-Control"] = CACHE_CONTROL
    return response


def _scope_args() -> dict:
    return {
        "product_id": request.args.get("productId") or None,
        "topic_id": request.args.get("topicId") or None,
        "path": request.args.get("path"),
        "active_only": query_flag("active"),
    }


@public_api.route("/<country>/products", methods=["GET"])
def products(country: str):
    return jsonify(current_store().reader.products(country))


@public_api.route("/<country>/products/<product_id>", methods=["GET"])
def product(country: str, product_id: str):
    return jsonify({"product": current_store().reader.product(country, product_id)})


@public_api.route("/<country>/topics", methods=["GET"])
def topics(country: str):
    return jsonify(current_store().reader.topics(country))


@public_api.route("/<country>/products/<product_folder_id>/topics", methods=["GET"])
def product_topics(country: str, product_folder_id: str):
    return jsonify(current_store().reader.product_topics(country, product_folder_id))


@public_api.route("/<country>/products/<product_folder_id>/topics/<topic_folder_id>/articles", methods=["GET"])
def topic_articles(country: str, product_folder_id: str, topic_folder_id: str):
    articles = current_store().reader.topic_articles(
        country, product_folder_id, topic_folder_id, resolve=query_flag("resolve")
    )
    return jsonify({"articles": articles})


@public_api.route(
    "/<country>/products/<product_folder_id>/topics/<topic_folder_id>/<any(videos, training):kind>",
    methods=["GET"],
)
def topic_document(country: str, product_folder_id: str, topic_folder_id: str, kind: str):
    items = current_store().reader.topic_document(country, product_folder_id, topic_folder_id, kind)
    return jsonify({kind: items})


@public_api.route("/<country>/articles", methods=["GET"])
def articles(country: str):
    return jsonify(current_store().reader.articles(country))


@public_api.route("/<country>/release-notes", methods=["GET"])
def release_notes(country: str):
    return jsonify(current_store().reader.release_notes(country))


@public_api.route("/<country>/release-notes/<product_id>", methods=["GET"])
def product_release_notes(country: str, product_id: str):
    return jsonify(current_store().reader.product_release_notes(country, product_id))


@public_api.route("/<country>/contact", methods=["GET"])
def contact(country: str):
    return jsonify(current_store().reader.contact(country))


@public_api.route("/<country>/incidents", methods=["GET"])
def incidents(country: str):
    return jsonify(current_store().reader.incidents(country, **_scope_args()))


@public_api.route("/<country>/popups", methods=["GET"])
def popups(country: str):
    return jsonify(current_store().reader.popups(country, **_scope_args()))
