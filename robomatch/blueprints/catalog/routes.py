# robomatch/blueprints/catalog/routes.py
from flask import jsonify, request

from ...models.tags import Brand, Skill
from ...services import catalog
from ...services.availability import periods_for
from ..utils import page_arg
from . import catalog_bp


@catalog_bp.get("/technicians")
def technicians():
    pg = catalog.search_technicians(
        q=request.args.get("q"),
        skill=request.args.get("skill"),
        brand=request.args.get("brand"),
        city=request.args.get("city"),
        max_rate=request.args.get("max_rate"),
        page=page_arg(),
    )
    return jsonify({
        "items": [p.to_public_dict() for p in pg.items],
        "page": pg.page,
        "pages": pg.pages,
        "total": pg.total,
    })


@catalog_bp.get("/technicians/<int:user_id>")
def technician(user_id):
    prof = catalog.get_technician(user_id)
    data = prof.to_public_dict()
    data["availability"] = [p.to_dict() for p in periods_for(user_id, upcoming_only=True)]
    return jsonify({"technician": data})


@catalog_bp.get("/skills")
def skills():
    return jsonify({"items": catalog.tag_names(Skill)})


@catalog_bp.get("/brands")
def brands():
    return jsonify({"items": catalog.tag_names(Brand)})
