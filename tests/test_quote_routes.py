"""
HTTP tests for the quote flow: chat quotes, agent drafts, and draft execution/rejection.
"""
import asyncio
import re

import pytest

from wrapcommand.core.errors import SupabaseError

QUOTE_NUMBER = re.compile(r"^WPW-\d{6}-[A-Z0-9]{4}$")


def chat_payload(**overrides):
    payload = {
        "vehicle_year": 2020,
        "vehicle_make": "Ford",
        "vehicle_model": "F150",
        "customer_email": "test@example.com",
        "product_type": "avery",
    }
    payload.update(overrides)
    return payload


def draft_payload(**overrides):
    payload = {
        "source_agent": "hello_email",
        "confidence": 0.9,
        "customer_email": "dana@example.com",
        "customer_name": "Dana Fleet",
        "vehicle_year": 2020,
        "vehicle_make": "Ford",
        "vehicle_model": "Transit",
        "original_message": "Can I get a price on wrapping our Transit?",
        "conversation_id": "conv-77",
    }
    payload.update(overrides)
    return payload


# =============================================================================
# CREATE QUOTE FROM CHAT
# =============================================================================

class TestCreateQuoteFromChat:

    def test_f150_quote_is_created_and_sent(self, client, fake_db, mailer):
        res = client.post("/create-quote-from-chat", json=chat_payload())
        assert res.status_code == 200
        body = res.json()
        assert body["success"] is True
        assert QUOTE_NUMBER.match(body["quote_number"])
        assert body["sqft"] == pytest.approx(305.2)
        assert body["price_per_sqft"] == 5.27
        assert body["material_cost"] == pytest.approx(round(305.2 * 5.27, 2))
        assert body["email_sent"] is True
        assert body["message"] == "Quote created and sent to test@example.com"

        quote = fake_db.rows("quotes")[0]
        assert quote["id"] == body["quote_id"]
        assert quote["status"] == "sent"
        assert quote["labor_cost"] == 0
        assert quote["margin"] == 0
        assert quote["total_price"] == body["material_cost"]

        assert len(mailer.sent) == 1
        assert mailer.sent[0]["to"] == ["test@example.com"]
        assert body["quote_number"] in mailer.sent[0]["subject"]

    def test_events_record_draft_before_email(self, client, fake_db):
        client.post("/create-quote-from-chat", json=chat_payload(conversation_id="conv-1"))
        types = [e["event_type"] for e in fake_db.events()]
        assert types == ["quote_drafted", "email_sent"]
        email_event = fake_db.events("email_sent")[0]
        assert email_event["payload"]["email_sent_to"] == ["test@example.com"]
        assert len(email_event["payload"]["email_body"]) <= 2000

    def test_heavy_duty_vehicle_flags_manual_review(self, client, fake_db):
        res = client.post("/create-quote-from-chat", json=chat_payload(
            vehicle_make="Chevrolet", vehicle_model="Silverado 4500",
        ))
        body = res.json()
        assert res.status_code == 200
        assert body["sqft"] == 300
        assert body["needs_review"] is True
        assert "manual review" in body["message"]
        assert fake_db.rows("quotes")[0]["metadata"]["size_source"] == "commercial_fallback"

    def test_missing_email_is_rejected_before_side_effects(self, client, fake_db, mailer):
        res = client.post("/create-quote-from-chat", json=chat_payload(customer_email=None))
        assert res.status_code == 400
        assert res.json() == {"error": "Customer email required"}
        assert fake_db.calls == []
        assert mailer.sent == []

    @pytest.mark.parametrize("email", ["lead-42@capture.local", "pending-lead@example.com"])
    def test_placeholder_email_is_never_sent(self, client, fake_db, mailer, email):
        res = client.post("/create-quote-from-chat", json=chat_payload(customer_email=email))
        body = res.json()
        assert res.status_code == 200
        assert body["email_sent"] is False
        assert mailer.sent == []
        assert fake_db.rows("quotes")[0]["status"] == "approved"

    def test_send_email_false(self, client, mailer):
        body = client.post("/create-quote-from-chat", json=chat_payload(send_email=False)).json()
        assert body["email_sent"] is False
        assert body["message"] == "Quote created and ready for review"
        assert mailer.sent == []

    def test_mail_failure_keeps_the_quote(self, client, fake_db, mailer):
        mailer.fail = True
        res = client.post("/create-quote-from-chat", json=chat_payload())
        body = res.json()
        assert res.status_code == 200
        assert body["success"] is True
        assert body["email_sent"] is False
        assert fake_db.rows("quotes")[0]["status"] == "approved"
        failed = fake_db.events("failed")
        assert len(failed) == 1
        assert failed[0]["payload"]["step"] == "send_quote_email"

    def test_mail_timeout_keeps_the_quote(self, client, fake_db, mailer):
        mailer.fail = asyncio.TimeoutError()
        res = client.post("/create-quote-from-chat", json=chat_payload())
        assert res.status_code == 200
        body = res.json()
        assert body["success"] is True
        assert body["email_sent"] is False
        assert len(fake_db.rows("quotes")) == 1
        failed = fake_db.events("failed")
        assert len(failed) == 1
        assert failed[0]["payload"]["error"] == "TimeoutError"

    def test_unconfigured_mailer_skips_email(self, client, mailer):
        mailer.configured = False
        body = client.post("/create-quote-from-chat", json=chat_payload()).json()
        assert body["email_sent"] is False
        assert mailer.sent == []

    def test_insert_failure_is_surfaced(self, client, fake_db, mailer):
        fake_db.fail_on[("insert", "quotes")] = SupabaseError(409, "duplicate key", "23505")
        res = client.post("/create-quote-from-chat", json=chat_payload())
        assert res.status_code == 500
        assert res.json() == {"success": False, "error": "Failed to create quote", "code": "23505"}
        assert mailer.sent == []

    def test_best_effort_failures_do_not_fail_the_quote(self, client, fake_db):
        fake_db.fail_on[("insert", "tasks")] = SupabaseError(500, "tasks down")
        fake_db.fail_on[("insert", "ai_actions")] = SupabaseError(500, "actions down")
        fake_db.fail_on[("update", "conversations")] = SupabaseError(500, "conversations down")
        res = client.post("/create-quote-from-chat", json=chat_payload(conversation_id="conv-1"))
        assert res.status_code == 200
        assert res.json()["success"] is True
        assert len(fake_db.rows("quotes")) == 1

    def test_unexpected_side_effect_errors_do_not_fail_the_quote(self, client, fake_db):
        fake_db.fail_on[("insert", "tasks")] = ValueError("bad task row")
        fake_db.fail_on[("update", "conversations")] = RuntimeError("connection reset")
        res = client.post("/create-quote-from-chat", json=chat_payload(conversation_id="conv-1"))
        assert res.status_code == 200
        assert res.json()["success"] is True
        assert len(fake_db.rows("quotes")) == 1

    def test_followup_task(self, client, fake_db):
        client.post("/create-quote-from-chat", json=chat_payload(vehicle_make="Honda", vehicle_model="Civic"))
        task = fake_db.rows("tasks")[0]
        assert task["priority"] == "medium"
        assert task["assigned_to"] == "alex_morgan"
        assert task["status"] == "pending"

    def test_expensive_quote_gets_high_priority_task(self, client, fake_db):
        body = client.post("/create-quote-from-chat", json=chat_payload(
            vehicle_model="Transit", product_type="3m contour",
        )).json()
        assert body["material_cost"] > 1500
        assert fake_db.rows("tasks")[0]["priority"] == "high"

    def test_conversation_chat_state(self, client, fake_db):
        fake_db.rows("conversations").append({"id": "conv-9", "status": "open"})
        body = client.post("/create-quote-from-chat", json=chat_payload(conversation_id="conv-9")).json()
        conversation = fake_db.rows("conversations")[0]
        assert conversation["status"] == "quote_sent"
        assert conversation["chat_state"]["quote_number"] == body["quote_number"]

    def test_ai_action_logged(self, client, fake_db):
        body = client.post("/create-quote-from-chat", json=chat_payload()).json()
        action = fake_db.rows("ai_actions")[0]
        assert action["action_type"] == "quote_created_from_chat"
        assert action["action_payload"]["quote_id"] == body["quote_id"]
        assert action["resolved"] is True

    def test_followup_sequence_enrollment(self, client, fake_db):
        client.post("/create-quote-from-chat", json=chat_payload(enroll_followup_sequence=True))
        enrollment = fake_db.rows("email_sequence_enrollments")[0]
        assert enrollment["customer_email"] == "test@example.com"

    def test_product_price_override(self, client):
        body = client.post("/create-quote-from-chat", json=chat_payload(
            product_price=6.5, product_name="Custom Film",
        )).json()
        assert body["price_per_sqft"] == 6.5
        assert body["material_cost"] == pytest.approx(round(305.2 * 6.5, 2))

    def test_malformed_body(self, client):
        res = client.post("/create-quote-from-chat", json=chat_payload(vehicle_year="twenty"))
        assert res.status_code == 400
        body = res.json()
        assert body["error"] == "Invalid request body"
        assert body["details"][0]["field"] == "vehicle_year"

    def test_cors_preflight(self, client):
        res = client.options("/create-quote-from-chat", headers={
            "Origin": "https://weprintwraps.com",
            "Access-Control-Request-Method": "POST",
        })
        assert res.status_code == 200
        assert "access-control-allow-origin" in res.headers


# =============================================================================
# CREATE QUOTE DRAFT
# =============================================================================

class TestCreateQuoteDraft:

    def test_channel_agent_draft(self, client, fake_db, mailer):
        res = client.post("/create-quote-draft", json=draft_payload())
        assert res.status_code == 200
        body = res.json()
        assert body["success"] is True
        assert body["status"] == "draft_created"
        assert body["gate_result"] == {
            "proceed": False,
            "convert_to_pending": True,
            "reason": "Agent hello_email lacks quote execution authority. Routing to executor.",
        }
        assert "ops_desk" in body["message"]

        draft = fake_db.rows("quote_drafts")[0]
        assert draft["id"] == body["draft_id"]
        assert draft["status"] == "draft"
        assert draft["sqft"] == pytest.approx(305.5)
        assert draft["total_price"] == pytest.approx(round(305.5 * 5.27, 2))
        assert body["draft"]["status"] == "draft"

        assert fake_db.rows("quotes") == []
        assert mailer.sent == []

    def test_draft_ready_action_and_event(self, client, fake_db):
        body = client.post("/create-quote-draft", json=draft_payload()).json()
        action = fake_db.rows("ai_actions")[0]
        assert action["action_type"] == "quote_draft_ready"
        assert action["action_payload"]["draft_id"] == body["draft_id"]
        assert action["resolved"] is False
        event = fake_db.events("quote_drafted")[0]
        assert event["conversation_id"] == "conv-77"
        assert event["payload"]["draft_id"] == body["draft_id"]

    def test_ops_desk_draft_passes_gate(self, client):
        body = client.post("/create-quote-draft", json=draft_payload(source_agent="ops_desk")).json()
        assert body["gate_result"]["proceed"] is True

    @pytest.mark.parametrize("overrides,error", [
        ({"source_agent": None}, "source_agent required"),
        ({"source_agent": "mystery_bot"}, "Unknown source agent: mystery_bot"),
        ({"customer_email": None}, "Customer email required"),
        ({"customer_email": "not-an-email"}, "Invalid email format: not-an-email"),
    ])
    def test_rejected_requests(self, client, fake_db, overrides, error):
        res = client.post("/create-quote-draft", json=draft_payload(**overrides))
        assert res.status_code == 400
        assert res.json() == {"error": error}
        assert fake_db.calls == []

    def test_low_confidence_warns(self, client):
        body = client.post("/create-quote-draft", json=draft_payload(confidence=0.4)).json()
        assert any("Low confidence" in w for w in body["warnings"])

    def test_missing_vehicle_flags_review(self, client, fake_db):
        body = client.post("/create-quote-draft", json=draft_payload(vehicle_make=None, vehicle_model=None)).json()
        assert body["success"] is True
        assert any("vehicle make" in w for w in body["warnings"])
        assert fake_db.rows("quote_drafts")[0]["needs_review"] is True

    def test_draft_insert_failure(self, client, fake_db):
        fake_db.fail_on[("insert", "quote_drafts")] = SupabaseError(500, "down", "XX000")
        res = client.post("/create-quote-draft", json=draft_payload())
        assert res.status_code == 500
        assert res.json()["code"] == "XX000"


# =============================================================================
# EXECUTE QUOTE DRAFT
# =============================================================================

class TestExecuteQuoteDraft:

    def test_ops_desk_executes_and_sends(self, client, fake_db, mailer, seed_draft):
        draft = seed_draft()
        fake_db.rows("ai_actions").append({
            "id": "action-1",
            "action_type": "quote_draft_ready",
            "action_payload": {"draft_id": draft["id"]},
            "resolved": False,
        })

        res = client.post("/execute-quote-draft", json={"draft_id": draft["id"]})
        assert res.status_code == 200
        body = res.json()
        assert body["success"] is True
        assert body["status"] == "sent"
        assert body["email_sent"] is True
        assert body["email_to"] == "dana@example.com"
        assert QUOTE_NUMBER.match(body["quote_number"])
        assert body["message"] == "Quote approved and sent to dana@example.com"

        quote = fake_db.rows("quotes")[0]
        assert quote["id"] == body["quote_id"]
        assert quote["status"] == "sent"
        assert quote["labor_cost"] == 0
        assert quote["margin"] == 0
        assert quote["total_price"] == 1844.5
        assert quote["source_conversation_id"] == "conv-123"

        stored = fake_db.rows("quote_drafts")[0]
        assert stored["status"] == "sent"
        assert stored["approved_at"]
        assert stored["sent_at"]

        action = fake_db.rows("ai_actions")[0]
        assert action["resolved"] is True
        assert action["resolved_by"] == "ops_desk"

        assert [e["event_type"] for e in fake_db.events()] == ["quote_attached", "email_sent"]
        assert len(mailer.sent) == 1

    def test_placeholder_email_is_approved_only(self, client, fake_db, mailer, seed_draft):
        draft = seed_draft(customer_email="lead-5@capture.local")
        body = client.post("/execute-quote-draft", json={"draft_id": draft["id"]}).json()
        assert body["status"] == "approved"
        assert body["email_sent"] is False
        assert body["email_to"] is None
        assert body["message"] == "Quote approved (no valid email to send)"
        assert mailer.sent == []
        assert fake_db.rows("quote_drafts")[0]["status"] == "approved"
        assert fake_db.rows("quote_drafts")[0]["sent_at"] is None

    def test_mail_failure_leaves_quote_approved(self, client, fake_db, mailer, seed_draft):
        mailer.fail = True
        draft = seed_draft()
        body = client.post("/execute-quote-draft", json={"draft_id": draft["id"]}).json()
        assert body["success"] is True
        assert body["status"] == "approved"
        assert fake_db.rows("quotes")[0]["status"] == "approved"
        assert len(fake_db.events("failed")) == 1

    def test_human_approver(self, client, fake_db, seed_draft):
        draft = seed_draft()
        res = client.post("/execute-quote-draft", json={
            "draft_id": draft["id"],
            "approving_agent": "user:7",
            "approved_by_user_id": "7",
        })
        assert res.status_code == 200
        assert fake_db.rows("quote_drafts")[0]["approved_by"] == "7"

    @pytest.mark.parametrize("agent", ["luigi", "hello_email", "instagram"])
    def test_channel_agent_is_forbidden(self, client, fake_db, seed_draft, agent):
        draft = seed_draft()
        res = client.post("/execute-quote-draft", json={"draft_id": draft["id"], "approving_agent": agent})
        assert res.status_code == 403
        body = res.json()
        assert body["success"] is False
        assert body["error"] == "Forbidden - Agent not authorized for quote execution"
        assert body["convert_to_pending"] is True
        assert agent in body["reason"]
        assert fake_db.calls == []

    def test_missing_draft(self, client, fake_db):
        res = client.post("/execute-quote-draft", json={"draft_id": "does-not-exist"})
        assert res.status_code == 404
        assert res.json() == {"success": False, "error": "Draft not found"}
        assert fake_db.mutations() == []

    @pytest.mark.parametrize("status", ["sent", "approved", "rejected"])
    def test_processed_draft_is_not_mutated(self, client, fake_db, mailer, seed_draft, status):
        draft = seed_draft(status=status)
        res = client.post("/execute-quote-draft", json={"draft_id": draft["id"]})
        assert res.status_code == 400
        assert res.json()["error"] == f"Draft already processed with status: {status}"
        assert fake_db.mutations() == []
        assert fake_db.rows("quote_drafts")[0]["status"] == status
        assert mailer.sent == []

    def test_missing_draft_id(self, client):
        res = client.post("/execute-quote-draft", json={})
        assert res.status_code == 400
        assert res.json() == {"error": "Missing draft_id"}

    def test_draft_then_execute(self, client, fake_db, mailer):
        draft_id = client.post("/create-quote-draft", json=draft_payload()).json()["draft_id"]

        blocked = client.post("/execute-quote-draft", json={"draft_id": draft_id, "approving_agent": "hello_email"})
        assert blocked.status_code == 403

        body = client.post("/execute-quote-draft", json={"draft_id": draft_id}).json()
        assert body["status"] == "sent"
        assert fake_db.rows("ai_actions")[0]["resolved"] is True

        again = client.post("/execute-quote-draft", json={"draft_id": draft_id})
        assert again.status_code == 400
        assert len(fake_db.rows("quotes")) == 1


# =============================================================================
# REJECT QUOTE DRAFT
# =============================================================================

class TestRejectQuoteDraft:

    def test_ops_desk_rejects(self, client, fake_db, seed_draft):
        draft = seed_draft()
        res = client.post("/reject-quote-draft", json={"draft_id": draft["id"], "reason": "Duplicate request"})
        assert res.status_code == 200
        assert res.json()["status"] == "rejected"

        stored = fake_db.rows("quote_drafts")[0]
        assert stored["status"] == "rejected"
        assert stored["rejected_reason"] == "Duplicate request"
        event = fake_db.events("marked_complete")[0]
        assert event["payload"]["reason"] == "Duplicate request"
        assert fake_db.rows("quotes") == []

    def test_channel_agent_cannot_reject(self, client, seed_draft):
        draft = seed_draft()
        res = client.post("/reject-quote-draft", json={"draft_id": draft["id"], "rejecting_agent": "luigi"})
        assert res.status_code == 403

    def test_rejected_draft_cannot_be_executed(self, client, seed_draft):
        draft = seed_draft()
        client.post("/reject-quote-draft", json={"draft_id": draft["id"]})
        res = client.post("/execute-quote-draft", json={"draft_id": draft["id"]})
        assert res.status_code == 400


# =============================================================================
# VEHICLE LOOKUP
# =============================================================================

class TestVehicleSqft:

    def test_lookup(self, client, fake_db):
        res = client.post("/vehicle-sqft", json={"vehicle_year": 2020, "vehicle_make": "Ford", "vehicle_model": "F150"})
        assert res.status_code == 200
        body = res.json()
        assert body["vehicle"] == "2020 Ford F150"
        assert body["source"] == "exact"
        assert body["sqft"] == pytest.approx(305.2)
        assert body["material_cost"] == pytest.approx(round(305.2 * 5.27, 2))
        assert fake_db.calls == []

    def test_unknown_vehicle(self, client):
        body = client.post("/vehicle-sqft", json={"vehicle_model": "Qwerty"}).json()
        assert body["source"] == "default_fallback"
        assert body["sqft"] == 275
        assert body["needs_review"] is True
