from __future__ import annotations

import json
from typing import Any

from quart import jsonify

from fast_constraints.core.outcome import ValidationOutcome

__all__ = ["ErrorResponder", "VALIDATION_STATUS_CODE"]

VALIDATION_STATUS_CODE = 400


class ErrorResponder:
    """
    Renders a failed `ValidationOutcome` into the one error shape clients see:

        {"violations": [{"fieldName": "id", "message": "must be greater than or equal to 5"}]}

    Entries are sorted by field name, ties keep evaluation order, so the same
    outcome always renders to the same bytes.
    """

    def render(self, outcome: ValidationOutcome) -> tuple[int, dict[str, Any]]:
        if outcome.is_valid:
            raise ValueError("Cannot render a valid outcome, there is nothing to report")

        # sorted() is stable, evaluation order breaks ties
        ordered = sorted(outcome.violations, key=lambda v: v.field_name)
        payload = {
            "violations": [
                {"fieldName": violation.field_name, "message": violation.message}
                for violation in ordered
            ]
        }
        return VALIDATION_STATUS_CODE, payload

    def render_body(self, outcome: ValidationOutcome) -> str:
        """Compact JSON text of the payload."""
        _, payload = self.render(outcome)
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)

    def to_response(self, outcome: ValidationOutcome):
        """Quart response tuple, for use inside an app or request context."""
        status_code, payload = self.render(outcome)
        return jsonify(payload), status_code
