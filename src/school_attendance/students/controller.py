from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.responses import api_view, roster_filters
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _body() -> dict:
        return request.get_json(silent=True) or {}

    @app.route("/api/students", methods=["GET"], endpoint="api_students")
    @api_view
    def api_students():
        students = container.student_service.list_students(**roster_filters())
        return jsonify([s.to_dict() for s in students])

    @app.route("/api/students", methods=["POST"], endpoint="api_enroll_student")
    @api_view
    def api_enroll_student():
        data = _body()
        student = container.student_service.enroll(
            name=data.get("name", ""),
            form=data.get("form"),
            class_name=data.get("class", ""),
            student_id=data.get("student_id"),
        )
        return jsonify(student.to_dict()), 201

    @app.route("/api/students/<student_id>", methods=["GET"], endpoint="api_get_student")
    @api_view
    def api_get_student(student_id: str):
        return jsonify(container.student_service.get(student_id).to_dict())

    @app.route("/api/students/<student_id>", methods=["PUT"], endpoint="api_update_student")
    @api_view
    def api_update_student(student_id: str):
        data = _body()
        student = container.student_service.update(
            student_id=student_id,
            name=data.get("name", ""),
            form=data.get("form"),
            class_name=data.get("class", ""),
        )
        return jsonify({"success": True, "message": "Student updated successfully", "student": student.to_dict()})

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="api_delete_student")
    @api_view
    def api_delete_student(student_id: str):
        cascade = (request.args.get("cascade") or "").lower() == "true"
        removed = container.student_service.delete(student_id, cascade=cascade)
        return jsonify({"success": True, "message": "Student deleted successfully", "deletedAttendance": removed})

    @app.route("/api/students/<student_id>/attendance", methods=["DELETE"], endpoint="api_clear_attendance")
    @api_view
    def api_clear_attendance(student_id: str):
        deleted = container.student_service.clear_attendance(student_id)
        return jsonify(
            {
                "success": True,
                "message": f"Deleted {deleted} attendance records for student",
                "deletedCount": deleted,
            }
        )
