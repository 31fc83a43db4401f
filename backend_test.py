# backend_test.py

import os
import unittest
from datetime import datetime
from unittest.mock import MagicMock, patch

import requests

from backend.errors import BackendError
from backend.get_bookings import get_admin_bookings, get_bookings, get_user_bookings
from backend.get_community import get_overstay_limits, save_overstay_limits
from backend.get_facilities import get_facilities, get_facility_by_id
from backend.login import create_session, login
from backend.post_booking import cancel_booking_request, create_booking
from models.booking import BookingStatus
from models.session import Session
from models.slot import Slot
from utils.overstay import DEFAULT_OVERSTAY_LIMITS


def fake_response(status_code=200, payload=None, json_error=False, reason=""):
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = payload
    return response


def booking_record(booking_id, hour, status="confirmed", people=1):
    return {
        "id": booking_id,
        "userId": "u1",
        "facilityId": "f1",
        "startsAt": f"2025-01-01T{hour:02d}:00:00",
        "endsAt": f"2025-01-01T{hour + 1:02d}:00:00",
        "status": status,
        "peopleCount": people,
    }


class TestSession(unittest.TestCase):
    def test_headers_and_url(self):
        session = Session(backend_url="http://api.test/", token="tok")

        self.assertEqual(session.url("/resident/bookings"), "http://api.test/resident/bookings")
        self.assertEqual(session.headers()["Authorization"], "Bearer tok")
        self.assertNotIn("Content-Type", session.headers())
        self.assertEqual(session.headers(json_body=True)["Content-Type"], "application/json")
        self.assertNotIn("Authorization", Session(backend_url="http://x").headers())


class TestLogin(unittest.TestCase):
    @patch("backend.login.requests.post")
    def test_login_returns_token(self, mock_post):
        mock_post.return_value = fake_response(payload={"data": {"token": "abc"}})

        self.assertEqual(login("http://api.test", "a@b.c", "pw"), "abc")
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "http://api.test/login")
        self.assertEqual(kwargs["json"], {"email": "a@b.c", "password": "pw"})

    @patch("backend.login.requests.post")
    def test_login_failure_raises(self, mock_post):
        mock_post.return_value = fake_response(401, {"error": "Invalid credentials"})

        with self.assertRaises(BackendError) as ctx:
            login("http://api.test", "a@b.c", "bad")
        self.assertEqual(ctx.exception.message, "Invalid credentials")
        self.assertEqual(ctx.exception.status_code, 401)

    @patch("backend.login.load_dotenv")
    def test_create_session_with_token_skips_login(self, _load_dotenv):
        env = {
            "BACKEND_URL": "http://api.test",
            "BACKEND_TOKEN": "tok",
            "USER_ID": "u1",
            "COMMUNITY_ID": "c1",
            "REQUEST_TIMEOUT": "5",
        }
        with patch.dict(os.environ, env, clear=True), patch(
            "backend.login.login"
        ) as mock_login:
            session = create_session()

        mock_login.assert_not_called()
        self.assertEqual(session.token, "tok")
        self.assertEqual(session.user_id, "u1")
        self.assertEqual(session.community_id, "c1")
        self.assertEqual(session.timeout, 5.0)

    @patch("backend.login.load_dotenv")
    def test_create_session_requires_backend_url(self, _load_dotenv):
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(RuntimeError):
                create_session()


class TestFetchers(unittest.TestCase):
    def setUp(self):
        self.session = Session(
            backend_url="http://api.test", token="tok", user_id="u1", community_id="c1"
        )

    @patch("backend.get_facilities.requests.get")
    def test_get_facilities_wrapped_shape(self, mock_get):
        mock_get.return_value = fake_response(
            payload={
                "data": [
                    {"id": "f1", "name": "Pool", "operatingHours": "09:00-12:00"},
                    {"name": "broken"},
                ]
            }
        )

        facilities = get_facilities(self.session)

        self.assertEqual([f.id for f in facilities], ["f1"])
        self.assertEqual(mock_get.call_args.kwargs["params"], {"communityId": "c1"})

    @patch("backend.get_facilities.requests.get")
    def test_get_facility_by_id(self, mock_get):
        mock_get.return_value = fake_response(payload=[{"id": "f1"}, {"id": "f2"}])
        self.assertEqual(get_facility_by_id(self.session, "f2").id, "f2")
        self.assertIsNone(get_facility_by_id(self.session, "f9"))

    @patch("backend.get_facilities.requests.get")
    def test_connection_error_becomes_backend_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("down")
        with self.assertRaises(BackendError) as ctx:
            get_facilities(self.session)
        self.assertIn("Failed to load facilities", ctx.exception.message)

    @patch("backend.get_bookings.requests.get")
    def test_get_bookings_sorted(self, mock_get):
        mock_get.return_value = fake_response(
            payload=[booking_record("b2", 11), booking_record("b1", 9)]
        )

        bookings = get_bookings(self.session, "f1", "2025-01-01")

        self.assertEqual([b.id for b in bookings], ["b1", "b2"])
        self.assertEqual(
            mock_get.call_args.kwargs["params"], {"facilityId": "f1", "date": "2025-01-01"}
        )

    @patch("backend.get_bookings.requests.get")
    def test_get_user_bookings_uses_session_user(self, mock_get):
        mock_get.return_value = fake_response(payload={"data": [booking_record("b1", 9)]})

        bookings = get_user_bookings(self.session, "2025-01-01")

        self.assertEqual(len(bookings), 1)
        self.assertTrue(mock_get.call_args.args[0].endswith("/resident/user-bookings"))
        self.assertEqual(mock_get.call_args.kwargs["params"]["userId"], "u1")

    @patch("backend.get_bookings.requests.get")
    def test_invalid_json_raises(self, mock_get):
        mock_get.return_value = fake_response(json_error=True)
        with self.assertRaises(BackendError):
            get_bookings(self.session, "f1", "2025-01-01")

    @patch("backend.get_bookings.requests.get")
    def test_admin_bookings_normalise_status(self, mock_get):
        mock_get.return_value = fake_response(
            payload={"bookings": [booking_record("b1", 9, status="CONFIRMED")]}
        )
        bookings = get_admin_bookings(self.session)
        self.assertEqual(bookings[0].status, BookingStatus.CONFIRMED)


class TestBookingWrites(unittest.TestCase):
    def setUp(self):
        self.session = Session(
            backend_url="http://api.test", token="tok", user_id="u1", community_id="c1"
        )
        self.slot = Slot(datetime(2025, 1, 1, 9, 0), datetime(2025, 1, 1, 10, 0))

    @patch("backend.post_booking.requests.post")
    def test_create_booking_returns_server_record(self, mock_post):
        mock_post.return_value = fake_response(
            201, {"data": booking_record("b9", 9, people=2)}
        )

        booking = create_booking(self.session, "f1", self.slot, 2, note="hi")

        self.assertEqual(booking.id, "b9")
        payload = mock_post.call_args.kwargs["json"]
        self.assertEqual(payload["peopleCount"], 2)
        self.assertEqual(payload["note"], "hi")
        self.assertEqual(payload["communityId"], "c1")

    @patch("backend.post_booking.requests.post")
    def test_create_booking_without_record_builds_one(self, mock_post):
        mock_post.return_value = fake_response(200, {"success": True})

        booking = create_booking(self.session, "f1", self.slot, 1)

        self.assertEqual(booking.status, BookingStatus.CONFIRMED)
        self.assertEqual(booking.starts_at, self.slot.start)

    @patch("backend.post_booking.requests.post")
    def test_create_booking_rejection_message(self, mock_post):
        mock_post.return_value = fake_response(409, {"error": "Slot is full"})
        with self.assertRaises(BackendError) as ctx:
            create_booking(self.session, "f1", self.slot, 1)
        self.assertEqual(ctx.exception.message, "Slot is full")

    @patch("backend.post_booking.requests.post")
    def test_create_booking_default_message(self, mock_post):
        mock_post.return_value = fake_response(500, json_error=True)
        with self.assertRaises(BackendError) as ctx:
            create_booking(self.session, "f1", self.slot, 1)
        self.assertEqual(ctx.exception.message, "Failed to create booking")

    @patch("backend.post_booking.requests.post")
    def test_create_booking_timeout(self, mock_post):
        mock_post.side_effect = requests.exceptions.Timeout()
        with self.assertRaises(BackendError) as ctx:
            create_booking(self.session, "f1", self.slot, 1)
        self.assertIn("timed out", ctx.exception.message)

    @patch("backend.post_booking.requests.post")
    def test_create_booking_conflict_without_body(self, mock_post):
        mock_post.return_value = fake_response(409, json_error=True, reason="Conflict")
        with self.assertRaises(BackendError) as ctx:
            create_booking(self.session, "f1", self.slot, 1)
        self.assertEqual(
            ctx.exception.message, "This time slot conflicts with another booking."
        )
        self.assertEqual(ctx.exception.status_code, 409)

    @patch("backend.post_booking.requests.post")
    def test_create_booking_falls_back_to_reason(self, mock_post):
        mock_post.return_value = fake_response(
            502, json_error=True, reason="Bad Gateway"
        )
        with self.assertRaises(BackendError) as ctx:
            create_booking(self.session, "f1", self.slot, 1)
        self.assertEqual(ctx.exception.message, "Bad Gateway")

    @patch("backend.post_booking.requests.patch")
    def test_cancel_booking_falls_back_to_reason(self, mock_patch):
        mock_patch.return_value = fake_response(409, {}, reason="Conflict")
        with self.assertRaises(BackendError) as ctx:
            cancel_booking_request(self.session, "b1")
        self.assertEqual(ctx.exception.message, "Conflict")

    @patch("backend.post_booking.requests.patch")
    def test_cancel_booking_request(self, mock_patch):
        mock_patch.return_value = fake_response(
            200, {"data": booking_record("b1", 9, status="cancelled")}
        )

        booking = cancel_booking_request(self.session, "b1")

        self.assertEqual(booking.status, BookingStatus.CANCELLED)
        self.assertTrue(mock_patch.call_args.args[0].endswith("/resident/bookings/b1/cancel"))

    @patch("backend.post_booking.requests.patch")
    def test_cancel_booking_failure(self, mock_patch):
        mock_patch.return_value = fake_response(403, {})
        with self.assertRaises(BackendError) as ctx:
            cancel_booking_request(self.session, "b1")
        self.assertEqual(ctx.exception.message, "Failed to cancel booking")


class TestCommunity(unittest.TestCase):
    def setUp(self):
        self.session = Session(backend_url="http://api.test", token="tok", community_id="c1")

    @patch("backend.get_community.requests.get")
    def test_limits_merged_over_defaults(self, mock_get):
        mock_get.return_value = fake_response(
            payload={"data": {"overstayLimits": {"STAFF": 480, "guest": 300}}}
        )

        limits = get_overstay_limits(self.session)

        self.assertEqual(limits["STAFF"], 480)
        self.assertEqual(limits["GUEST"], 300)
        self.assertEqual(limits["DELIVERY"], DEFAULT_OVERSTAY_LIMITS["DELIVERY"])

    @patch("backend.get_community.requests.get")
    def test_limits_fall_back_to_defaults(self, mock_get):
        mock_get.return_value = fake_response(500, {"message": "boom"})
        self.assertEqual(get_overstay_limits(self.session), DEFAULT_OVERSTAY_LIMITS)

    @patch("backend.get_community.requests.post")
    @patch("backend.get_community.requests.get")
    def test_save_sends_full_community(self, mock_get, mock_post):
        mock_get.return_value = fake_response(
            payload={
                "success": True,
                "data": {
                    "name": "Green Acres",
                    "address": "1 Main St",
                    "facilities": [{"facilityType": "POOL", "enabled": True}],
                },
            }
        )
        mock_post.return_value = fake_response(payload={"success": True})

        self.assertTrue(save_overstay_limits(self.session, {"STAFF": 480}))

        payload = mock_post.call_args.kwargs["json"]
        self.assertEqual(payload["name"], "Green Acres")
        self.assertEqual(payload["communityId"], "c1")
        self.assertEqual(payload["overstayLimits"]["STAFF"], 480)
        self.assertEqual(payload["facilities"][0]["operatingHours"], "09:00-21:00")
        self.assertEqual(payload["facilities"][0]["priceType"], "per_hour")

    @patch("backend.get_community.requests.post")
    @patch("backend.get_community.requests.get")
    def test_save_unexpected_response(self, mock_get, mock_post):
        mock_get.return_value = fake_response(payload={"data": {}})
        mock_post.return_value = fake_response(payload={"success": False, "message": "Invalid"})

        with self.assertRaises(BackendError) as ctx:
            save_overstay_limits(self.session, {})
        self.assertEqual(ctx.exception.message, "Invalid")


if __name__ == "__main__":
    unittest.main()
