from datetime import datetime, timezone as dt_timezone
from unittest.mock import patch, Mock
import uuid

import requests
from django.core.cache import cache
from django.test import override_settings
from django.urls import reverse
from rest_framework.test import APITestCase

from audittrail.models import ActivityLog
from authentication.models import User
from chat.models import ChatMessage, ChatSession
from documents.models import Document, Fund


def _completion(content):
    resp = Mock()
    resp.status_code = 200
    resp.raise_for_status.return_value = None
    resp.json.return_value = {"choices": [{"message": {"role": "assistant", "content": content}}]}
    return resp


def _login(client, user):
    session = client.session
    session["user_id"] = str(user.user_id)
    session["username"] = user.username
    session.save()


@override_settings(ASSISTANT_API_KEY="test-key", CHAT_SEND_RATE="1000/m")
class ChatSendTests(APITestCase):
    def setUp(self):
        cache.clear()
        self.user = User.objects.create(
            username="auditor",
            display_name="Auditor",
            email="auditor@example.com",
            roles=["compliance"],
            is_verified=True,
        )
        _login(self.client, self.user)
        self.url = reverse("chat:send")

    @patch("chat.provider.requests.post")
    def test_send_without_session_creates_one(self, mock_post):
        mock_post.return_value = _completion("**Hi** there")

        r = self.client.post(self.url, {"message": "  Summarize Q3  "}, format="json")

        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["sessionTitle"], "Summarize Q3")
        self.assertEqual(body["userMessage"]["role"], "user")
        self.assertEqual(body["userMessage"]["content"], "  Summarize Q3  ")
        self.assertEqual(body["assistantMessage"]["content"], "Hi there")
        self.assertEqual(body["assistantMessage"]["sessionId"], body["sessionId"])

        sess = ChatSession.objects.get()
        self.assertEqual(str(sess.id), body["sessionId"])
        self.assertEqual(sess.user_id, self.user.user_id)
        self.assertEqual(sess.messages.count(), 2)

    @patch("chat.provider.requests.post")
    def test_send_into_existing_session(self, mock_post):
        mock_post.return_value = _completion("first")
        sid = self.client.post(self.url, {"message": "one"}, format="json").json()["sessionId"]

        mock_post.return_value = _completion("second")
        r = self.client.post(self.url, {"message": "two", "sessionId": sid}, format="json")

        self.assertEqual(r.json()["sessionId"], sid)
        self.assertEqual(r.json()["sessionTitle"], "one")
        self.assertEqual(ChatSession.objects.count(), 1)
        sent = mock_post.call_args.kwargs["json"]["messages"]
        self.assertEqual([m["content"] for m in sent[1:]], ["one", "first", "two"])

    @patch("chat.provider.requests.post")
    def test_null_session_id_and_empty_document_ids_accepted(self, mock_post):
        mock_post.return_value = _completion("ok")
        r = self.client.post(
            self.url,
            {"message": "hello", "sessionId": None, "documentIds": []},
            format="json",
        )
        self.assertEqual(r.status_code, 200)
        sent = mock_post.call_args.kwargs["json"]["messages"]
        self.assertEqual([m["role"] for m in sent], ["system", "user"])

    @patch("chat.provider.requests.post")
    def test_document_context_included(self, mock_post):
        mock_post.return_value = _completion("summary")
        fund = Fund.objects.create(name="Beta Income", code="BIF")
        doc = Document.objects.create(
            fund=fund,
            title="Q3 Compliance Review",
            type=Document.DocumentType.AUDIT_REPORT,
            status=Document.Status.PENDING,
            period_start=datetime(2024, 7, 1, tzinfo=dt_timezone.utc),
            period_end=datetime(2024, 9, 30, tzinfo=dt_timezone.utc),
        )

        r = self.client.post(
            self.url,
            {"message": "Summarize Q3", "documentIds": [str(doc.id), str(uuid.uuid4())]},
            format="json",
        )

        self.assertEqual(r.status_code, 200)
        sent = mock_post.call_args.kwargs["json"]["messages"]
        self.assertEqual([m["role"] for m in sent], ["system", "system", "user"])
        ctx = sent[1]["content"]
        self.assertIn("Title: Q3 Compliance Review", ctx)
        self.assertIn("Fund: Beta Income (BIF)", ctx)
        self.assertIn("Type: AUDIT_REPORT", ctx)
        self.assertIn("Status: PENDING", ctx)
        self.assertIn("2024-07-01T00:00:00+00:00", ctx)
        self.assertIn("2024-09-30T00:00:00+00:00", ctx)
        self.assertIn("Description: n/a", ctx)

    def test_duplicate_document_ids_rejected(self):
        r = self.client.post(
            self.url,
            {"message": "x", "documentIds": ["a", "a"]},
            format="json",
        )
        self.assertEqual(r.status_code, 400)
        self.assertIn("documentIds", r.json())

    def test_missing_message_rejected(self):
        r = self.client.post(self.url, {}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertIn("message", r.json())

    @patch("chat.provider.requests.post")
    def test_non_string_message_rejected(self, mock_post):
        for bad in (5, True, ["hi"], {"text": "hi"}):
            r = self.client.post(self.url, {"message": bad}, format="json")
            self.assertEqual(r.status_code, 400)
            self.assertIn("message", r.json())
        mock_post.assert_not_called()
        self.assertEqual(ChatMessage.objects.count(), 0)

    def test_non_string_document_id_rejected(self):
        r = self.client.post(self.url, {"message": "x", "documentIds": [1]}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertIn("documentIds", r.json())

    @patch("chat.provider.requests.post")
    def test_foreign_session_id_creates_new_session(self, mock_post):
        mock_post.return_value = _completion("ok")
        foreign = ChatSession.objects.create(user_id=uuid.uuid4(), title="Someone else")

        r = self.client.post(
            self.url,
            {"message": "mine", "sessionId": str(foreign.id)},
            format="json",
        )

        self.assertEqual(r.status_code, 200)
        self.assertNotEqual(r.json()["sessionId"], str(foreign.id))
        self.assertEqual(foreign.messages.count(), 0)

    @override_settings(ASSISTANT_API_KEY="")
    @patch("chat.provider.requests.post")
    def test_missing_credential_returns_401_without_call(self, mock_post):
        r = self.client.post(self.url, {"message": "hello"}, format="json")

        self.assertEqual(r.status_code, 401)
        mock_post.assert_not_called()
        self.assertEqual(ChatSession.objects.count(), 0)

    @patch("chat.provider.requests.post", side_effect=requests.ConnectionError("refused"))
    def test_provider_failure_is_generic_503(self, _mock_post):
        with self.assertLogs("chat.provider", level="ERROR"):
            r = self.client.post(self.url, {"message": "hello"}, format="json")

        self.assertEqual(r.status_code, 503)
        self.assertNotIn("refused", r.content.decode())
        self.assertEqual(
            list(ChatMessage.objects.values_list("role", "content")),
            [("user", "hello")],
        )
        self.assertTrue(
            ActivityLog.objects.filter(event_type=ActivityLog.EventType.CHAT_PROVIDER_FAILED).exists()
        )

    @patch("chat.provider.requests.post")
    def test_send_is_logged(self, mock_post):
        mock_post.return_value = _completion("ok")
        self.client.post(self.url, {"message": "hello"}, format="json")

        events = set(ActivityLog.objects.values_list("event_type", flat=True))
        self.assertEqual(
            events,
            {
                ActivityLog.EventType.CHAT_SESSION_CREATED,
                ActivityLog.EventType.CHAT_MESSAGE_SENT,
            },
        )
        log = ActivityLog.objects.filter(event_type=ActivityLog.EventType.CHAT_MESSAGE_SENT).get()
        self.assertEqual(log.username, "auditor")
        self.assertEqual(log.target_model, "chatsession")

    def test_unauthenticated_send_denied(self):
        self.client.logout()
        r = self.client.post(self.url, {"message": "hello"}, format="json")
        self.assertEqual(r.status_code, 403)


@override_settings(ASSISTANT_API_KEY="test-key")
class ChatSessionViewTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create(
            username="owner",
            email="owner@example.com",
            is_verified=True,
        )
        self.other = User.objects.create(
            username="other",
            email="other@example.com",
            is_verified=True,
        )
        _login(self.client, self.user)

        self.sess = ChatSession.objects.create(user_id=self.user.user_id, title="Mine")
        ChatMessage.objects.create(session=self.sess, role="user", content="q")
        ChatMessage.objects.create(session=self.sess, role="assistant", content="a")
        self.foreign = ChatSession.objects.create(user_id=self.other.user_id, title="Theirs")

    def test_list_only_own_sessions_with_counts(self):
        r = self.client.get(reverse("chat:sessions"))
        self.assertEqual(r.status_code, 200)
        data = r.json()
        self.assertEqual(len(data), 1)
        self.assertEqual(data[0]["id"], str(self.sess.id))
        self.assertEqual(data[0]["messageCount"], 2)
        self.assertIn("createdAt", data[0])

    def test_get_session_with_ordered_messages(self):
        r = self.client.get(reverse("chat:session_detail", args=[str(self.sess.id)]))
        self.assertEqual(r.status_code, 200)
        self.assertEqual([m["role"] for m in r.json()["messages"]], ["user", "assistant"])

    def test_get_foreign_or_missing_session_is_empty(self):
        for sid in (str(self.foreign.id), str(uuid.uuid4()), "not-a-uuid"):
            r = self.client.get(reverse("chat:session_detail", args=[sid]))
            self.assertEqual(r.status_code, 200)
            self.assertEqual(r.content, b"")

    def test_delete_session_then_fetch_returns_nothing(self):
        url = reverse("chat:session_detail", args=[str(self.sess.id)])
        r = self.client.delete(url)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"success": True})
        self.assertFalse(ChatSession.objects.filter(pk=self.sess.pk).exists())
        self.assertEqual(ChatMessage.objects.filter(session_id=self.sess.pk).count(), 0)

        again = self.client.get(url)
        self.assertEqual(again.content, b"")
        self.assertTrue(
            ActivityLog.objects.filter(event_type=ActivityLog.EventType.CHAT_SESSION_DELETED).exists()
        )

    def test_delete_foreign_session_is_noop(self):
        r = self.client.delete(reverse("chat:session_detail", args=[str(self.foreign.id)]))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.content, b"")
        self.assertTrue(ChatSession.objects.filter(pk=self.foreign.pk).exists())

    def test_trailing_slash_alias(self):
        r = self.client.get("/chat/sessions/")
        self.assertEqual(r.status_code, 200)
