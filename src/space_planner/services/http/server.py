from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from ...api import (
    ActivityRequest,
    CalendarConnectionRequest,
    PatternRequest,
    PlanRequest,
    SelectedDatesRequest,
    UnavailableDatesRequest,
    serialize_pattern,
    serialize_plan,
)
from ...core import ics_filename
from ...domain import utc_timestamp
from ...errors import (
    NotFoundError,
    PersistenceError,
    PlannerError,
    UnavailableDateError,
    ValidationError,
)
from ..planner import PlannerService

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (UnavailableDateError, 409),
    (PersistenceError, 503),
)


def _status_for(exc: PlannerError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


def create_app(service: Optional[PlannerService] = None) -> FastAPI:
    planner = service or PlannerService()
    server_settings = planner.context.settings.server

    app = FastAPI(title="Space Planner API", version="1.0.0")
    app.state.planner = planner
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(server_settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PlannerError)
    async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
        status = _status_for(exc)
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        else:
            logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
        content: Dict[str, Any] = {"success": False, "error": str(exc)}
        if isinstance(exc, UnavailableDateError):
            content["dates"] = list(exc.dates)
        if isinstance(exc, PersistenceError) and exc.fallback_path is not None:
            content["fallback"] = str(exc.fallback_path)
        return JSONResponse(status_code=status, content=content)

    @app.get("/api/health")
    def health() -> Dict[str, Any]:
        return {
            "status": "OK",
            "message": "Space Planner API is running",
            "timestamp": utc_timestamp(),
            "environment": server_settings.environment,
            "degraded": planner.degraded,
        }

    @app.get("/api/planner-data")
    def get_planner_data() -> Dict[str, Any]:
        return {"success": True, "data": planner.state.to_record()}

    @app.post("/api/planner-data")
    def save_planner_data(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
        state = planner.replace_state(payload)
        return {"success": True, "message": "Planner data saved successfully", "timestamp": state.last_updated}

    @app.put("/api/unavailable-dates")
    def put_unavailable_dates(payload: UnavailableDatesRequest) -> Dict[str, Any]:
        count = planner.set_unavailable_dates(payload.unavailable_dates)
        return {"success": True, "message": "Unavailable dates updated successfully", "count": count}

    @app.delete("/api/unavailable-dates")
    def clear_unavailable_dates() -> Dict[str, Any]:
        planner.clear_all_unavailable()
        return {"success": True, "message": "All dates cleared"}

    @app.post("/api/unavailable-dates/{day}/toggle")
    def toggle_unavailable(day: str) -> Dict[str, Any]:
        unavailable = planner.toggle_unavailable(day)
        return {"success": True, "date": day, "unavailable": unavailable}

    @app.put("/api/selected-dates")
    def put_selected_dates(payload: SelectedDatesRequest) -> Dict[str, Any]:
        count = planner.set_selected_dates(payload.selected_dates)
        return {"success": True, "message": "Selections updated successfully", "count": count}

    @app.post("/api/selected-dates/{day}/toggle")
    def toggle_selected(day: str) -> Dict[str, Any]:
        selected = planner.select(day)
        return {"success": True, "date": day, "selected": selected}

    @app.get("/api/mutual-dates")
    def mutual_dates() -> Dict[str, Any]:
        return {"success": True, "dates": planner.mutual_dates()}

    @app.post("/api/confirmed-plans")
    def confirm_plan(payload: PlanRequest) -> Dict[str, Any]:
        plan = planner.confirm(
            payload.date,
            payload.activity,
            payload.time,
            payload.location,
            start_time=payload.start_time,
            end_time=payload.end_time,
        )
        return {"success": True, "message": "Plan confirmed successfully", "plan": serialize_plan(plan)}

    @app.delete("/api/confirmed-plans/{plan_id}")
    def delete_plan(plan_id: str) -> Dict[str, Any]:
        planner.delete_plan(plan_id)
        return {"success": True, "message": "Plan deleted successfully"}

    @app.get("/api/confirmed-plans/{plan_id}/ics")
    def plan_ics(plan_id: str) -> Response:
        plan = planner.get_plan(plan_id)
        return Response(
            content=planner.export_plan_ics(plan_id),
            media_type="text/calendar",
            headers={"Content-Disposition": f'attachment; filename="{ics_filename(plan)}"'},
        )

    @app.post("/api/recurring-patterns")
    def add_pattern(payload: PatternRequest) -> Dict[str, Any]:
        pattern = planner.add_pattern(payload.type, payload.day, payload.day_name)
        return {
            "success": True,
            "message": "Recurring pattern added successfully",
            "pattern": serialize_pattern(pattern),
        }

    @app.delete("/api/recurring-patterns/{pattern_id}")
    def remove_pattern(pattern_id: str) -> Dict[str, Any]:
        planner.remove_pattern(pattern_id)
        return {"success": True, "message": "Recurring pattern deleted successfully"}

    @app.post("/api/recurring-patterns/apply")
    def apply_patterns() -> Dict[str, Any]:
        count = planner.apply_patterns()
        return {"success": True, "count": count}

    @app.post("/api/custom-activities")
    def add_activity(payload: ActivityRequest) -> Dict[str, Any]:
        activities = planner.add_custom_activity(payload.name)
        return {"success": True, "activities": activities}

    @app.delete("/api/custom-activities/{name}")
    def remove_activity(name: str) -> Dict[str, Any]:
        activities = planner.remove_custom_activity(name)
        return {"success": True, "activities": activities}

    @app.post("/api/custom-activities/{name}/suggest")
    def suggest_activity(name: str) -> Dict[str, Any]:
        plan = planner.suggest_activity(name)
        return {"success": True, "plan": serialize_plan(plan)}

    @app.put("/api/calendar-connection")
    def calendar_connection(payload: CalendarConnectionRequest) -> Dict[str, Any]:
        planner.set_calendar_connected(payload.connected)
        return {"success": True, "connected": payload.connected}

    @app.get("/api/export")
    def export_backup() -> JSONResponse:
        filename = f"space-planner-backup-{planner.today()}.json"
        return JSONResponse(
            content=planner.export_backup(),
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.post("/api/import")
    def import_backup(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
        planner.import_backup(payload)
        return {"success": True, "message": "Data imported successfully"}

    return app


def run_local_server(host: str = "0.0.0.0", port: int = 3000, service: Optional[PlannerService] = None) -> None:
    import asyncio

    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    app = create_app(service)
    app.state.planner.load()
    config = Config()
    config.bind = [f"{host}:{port}"]
    logger.info("Space Planner listening on %s:%s", host, port)
    asyncio.run(serve(app, config))
