"""
Tests for account, catalog, payment key and admin monitoring flows
"""

import json
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from kampyn.application.use_cases.account_use_case import (
    AccountUseCase,
    SignupRequest,
    password_problems,
)
from kampyn.application.use_cases.admin_monitoring_use_case import (
    InvoiceFilters,
    InvoiceReportingUseCase,
    RateLimitMonitoringUseCase,
)
from kampyn.application.use_cases.product_catalog_use_case import ProductCatalogUseCase
from kampyn.domain.entities.admin_entity import Invoice
from kampyn.domain.entities.vendor_entity import College, UniversityCharges
from kampyn.domain.value_objects.order_enums import ItemKind
from kampyn.infrastructure.repositories.http_account_repository import HttpAccountRepository
from kampyn.infrastructure.repositories.http_admin_repository import (
    HttpInvoiceRepository,
    HttpRateLimitRepository,
)
from kampyn.infrastructure.repositories.http_catalog_repository import HttpCatalogRepository
from kampyn.infrastructure.repositories.http_payment_repository import HttpPaymentRepository
from kampyn.infrastructure.services.notification_service import NotificationLevel, Notifier
from kampyn.infrastructure.utilities.exceptions import (
    NetworkError,
    PaymentError,
    UnverifiedAccountError,
    ValidationError,
)

from .factories import catalog_item


def invoice(invoice_id: str, recipient_type: str, pdf_url: str = None) -> Invoice:
    return Invoice.from_dict(
        {"_id": invoice_id, "recipientType": recipient_type, "pdfUrl": pdf_url, "totalAmount": 75}
    )


class TestAccountUseCase:
    """Test login, session refresh and signup validation"""

    @pytest.mark.asyncio
    async def test_login_keeps_token(self, make_client, session_store):
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"message": "Login successful", "token": "tok_1"})

        client = make_client(handler)
        use_case = AccountUseCase(HttpAccountRepository(client), session_store)

        await use_case.login(" asha@kiit.ac.in ", "Secret@123")

        assert bodies == [{"identifier": "asha@kiit.ac.in", "password": "Secret@123"}]
        assert session_store.get() == "tok_1"
        assert use_case.is_logged_in
        await client.aclose()

    @pytest.mark.asyncio
    async def test_unverified_account(self, make_client, session_store):
        client = make_client(
            lambda request: httpx.Response(
                400,
                json={"message": "Account not verified. OTP sent to email.", "redirectTo": "/otpverification"},
            )
        )
        use_case = AccountUseCase(HttpAccountRepository(client), session_store)

        with pytest.raises(UnverifiedAccountError) as exc_info:
            await use_case.login("asha@kiit.ac.in", "Secret@123")

        assert exc_info.value.redirect_to == "/otpverification"
        assert session_store.get() is None
        await client.aclose()

    @pytest.mark.asyncio
    async def test_refresh_rejected_clears_token(self, make_client, session_store):
        session_store.set("stale")
        client = make_client(lambda request: httpx.Response(401, json={"message": "jwt expired"}))
        use_case = AccountUseCase(HttpAccountRepository(client), session_store)

        assert await use_case.refresh() is False
        assert session_store.get() is None
        await client.aclose()

    @pytest.mark.asyncio
    async def test_refresh_replaces_token(self, session_store):
        session_store.set("old")
        repository = MagicMock()
        repository.refresh = AsyncMock(return_value={"token": "new"})

        assert await AccountUseCase(repository, session_store).refresh() is True
        assert session_store.get() == "new"

    @pytest.mark.asyncio
    async def test_refresh_without_token_sends_nothing(self, session_store):
        repository = MagicMock()
        repository.refresh = AsyncMock()

        assert await AccountUseCase(repository, session_store).refresh() is False
        repository.refresh.assert_not_awaited()

    def test_password_policy(self):
        assert password_problems("Secret@123") == []
        assert "an uppercase letter" in password_problems("secret@123")
        assert "a digit" in password_problems("Secret@abc")
        assert "no whitespace" in password_problems("Secret @123")
        assert "at least 8 characters" in password_problems("S@1a")

    @pytest.mark.asyncio
    async def test_signup_payload(self, session_store):
        repository = MagicMock()
        repository.signup = AsyncMock(return_value={"message": "OTP sent"})
        use_case = AccountUseCase(repository, session_store)

        await use_case.signup(
            SignupRequest(
                full_name=" Asha Rao ",
                email="asha@kiit.ac.in",
                phone="+91 98765 43210",
                gender="female",
                password="Secret@123",
                confirm_password="Secret@123",
                uni_id="uni_1",
            )
        )

        repository.signup.assert_awaited_once_with(
            {
                "fullName": "Asha Rao",
                "email": "asha@kiit.ac.in",
                "phone": "9876543210",
                "gender": "female",
                "password": "Secret@123",
                "uniID": "uni_1",
            }
        )

    @pytest.mark.asyncio
    async def test_signup_password_mismatch(self, session_store):
        repository = MagicMock()
        repository.signup = AsyncMock()
        request = SignupRequest("Asha", "asha@kiit.ac.in", "9876543210", "female", "Secret@123", "Secret@124", "uni_1")

        with pytest.raises(ValidationError) as exc_info:
            await AccountUseCase(repository, session_store).signup(request)

        assert exc_info.value.field == "confirm_password"
        repository.signup.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_verify_otp(self, session_store):
        repository = MagicMock()
        repository.verify_otp = AsyncMock(return_value={"token": "tok_otp"})
        use_case = AccountUseCase(repository, session_store)

        with pytest.raises(ValidationError):
            await use_case.verify_otp("asha@kiit.ac.in", "12a456")

        await use_case.verify_otp("asha@kiit.ac.in", "123456")
        repository.verify_otp.assert_awaited_once_with("asha@kiit.ac.in", "123456")
        assert session_store.get() == "tok_otp"

    @pytest.mark.asyncio
    async def test_college_slug(self, session_store):
        repository = MagicMock()
        repository.list_colleges = AsyncMock(
            return_value=[College("uni_1", "KIIT University"), College("uni_2", "IIT Delhi")]
        )
        use_case = AccountUseCase(repository, session_store)

        assert await use_case.college_slug_for("uni_2") == "iit-delhi"
        assert await use_case.college_slug_for("uni_9") is None


class TestProductCatalogUseCase:
    """Test catalog loading and charge fallbacks"""

    @pytest.mark.asyncio
    async def test_vendor_catalog_from_backend(self, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/retail"):
                return httpx.Response(
                    200, json={"data": {"retailItems": [{"_id": "r1", "name": "Chips", "price": 10, "quantity": 4}]}}
                )
            return httpx.Response(
                200, json={"data": {"produceItems": [{"_id": "p1", "name": "Dosa", "price": 40, "isAvailable": "Y"}]}}
            )

        client = make_client(handler)
        catalog = await ProductCatalogUseCase(HttpCatalogRepository(client)).get_vendor_catalog("vendor_1")

        assert [item.item_id for item in catalog.items] == ["r1", "p1"]
        assert catalog.find("p1").kind is ItemKind.PRODUCE
        assert catalog.find("p1", ItemKind.RETAIL) is None
        await client.aclose()

    @pytest.mark.asyncio
    async def test_one_failing_half_is_tolerated(self):
        repository = MagicMock()

        async def items(vendor_id, kind):
            if kind is ItemKind.RETAIL:
                raise NetworkError("retail down")
            return [catalog_item()]

        repository.get_vendor_items = AsyncMock(side_effect=items)

        catalog = await ProductCatalogUseCase(repository).get_vendor_catalog("vendor_1")

        assert catalog.retail_items == []
        assert len(catalog.produce_items) == 1

    @pytest.mark.asyncio
    async def test_both_halves_failing_raises(self):
        repository = MagicMock()
        repository.get_vendor_items = AsyncMock(side_effect=NetworkError("down"))

        with pytest.raises(NetworkError):
            await ProductCatalogUseCase(repository).get_vendor_catalog("vendor_1")

    @pytest.mark.asyncio
    async def test_charges_fall_back_to_defaults(self):
        repository = MagicMock()
        repository.get_university_charges = AsyncMock(side_effect=NetworkError("down"))

        charges = await ProductCatalogUseCase(repository, 4, 30).get_university_charges("vendor_1")

        assert (charges.packing_charge, charges.delivery_charge, charges.is_default) == (4, 30, True)

    @pytest.mark.asyncio
    async def test_charges_from_backend(self):
        repository = MagicMock()
        repository.get_university_charges = AsyncMock(
            return_value=UniversityCharges(7, 20, "KIIT University")
        )

        charges = await ProductCatalogUseCase(repository).get_university_charges("vendor_1")

        assert charges.packing_charge == 7
        assert charges.is_default is False

    @pytest.mark.asyncio
    async def test_toggle_favourite_path(self, make_client):
        paths = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append((request.method, request.url.path))
            return httpx.Response(200, json={"message": "Favourite updated"})

        client = make_client(handler)
        await ProductCatalogUseCase(HttpCatalogRepository(client)).toggle_favourite(
            "user_1", catalog_item("p1"), "vendor_1"
        )

        assert paths == [("PATCH", "/fav/user_1/p1/Produce/vendor_1")]
        await client.aclose()


class TestPaymentKey:
    """Test the provider key lookup"""

    @pytest.mark.asyncio
    async def test_configured_key_used_when_lookup_fails(self, make_client):
        client = make_client(lambda request: httpx.Response(503))
        repository = HttpPaymentRepository(client, fallback_key="rzp_test_key")

        assert await repository.get_public_key() == "rzp_test_key"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_no_key_anywhere(self, make_client):
        client = make_client(lambda request: httpx.Response(200, json={}))

        with pytest.raises(PaymentError):
            await HttpPaymentRepository(client).get_public_key()
        await client.aclose()

    @pytest.mark.asyncio
    async def test_provider_order_without_id(self, make_client):
        client = make_client(lambda request: httpx.Response(200, json={"amount": 7500}))

        with pytest.raises(PaymentError):
            await HttpPaymentRepository(client).create_provider_order({"total": 75})
        await client.aclose()


class TestInvoiceReportingUseCase:
    """Test invoice listing and downloads"""

    @pytest.mark.asyncio
    async def test_list_sends_only_set_filters(self, make_client):
        params = []

        def handler(request: httpx.Request) -> httpx.Response:
            params.append(dict(request.url.params))
            return httpx.Response(
                200,
                json={"data": {"invoices": [], "pagination": {"currentPage": 1, "totalPages": 0, "totalInvoices": 0}}},
            )

        client = make_client(handler)
        use_case = InvoiceReportingUseCase(HttpInvoiceRepository(client))

        await use_case.list_invoices(
            InvoiceFilters(page=2, status="all", recipient_type="vendor", start_date=date(2024, 5, 1))
        )

        assert params == [
            {"page": "2", "limit": "20", "recipientType": "vendor", "startDate": "2024-05-01"}
        ]
        await client.aclose()

    @pytest.mark.asyncio
    async def test_bulk_download_requires_date_range(self):
        repository = MagicMock()
        repository.bulk_download = AsyncMock(return_value=b"PK")
        use_case = InvoiceReportingUseCase(repository)

        with pytest.raises(ValidationError):
            await use_case.bulk_download(InvoiceFilters(start_date=date(2024, 5, 1)))
        with pytest.raises(ValidationError):
            await use_case.bulk_download(
                InvoiceFilters(start_date=date(2024, 5, 2), end_date=date(2024, 5, 1))
            )
        repository.bulk_download.assert_not_awaited()

        archive = await use_case.bulk_download(
            InvoiceFilters(start_date=date(2024, 5, 1), end_date=date(2024, 5, 31))
        )

        assert archive == b"PK"
        sent = repository.bulk_download.call_args.args[0]
        assert "page" not in sent and "limit" not in sent
        assert sent["endDate"] == "2024-05-31"

    @pytest.mark.asyncio
    async def test_download_url_prefers_vendor_invoice(self):
        repository = MagicMock()
        repository.get_order_invoices = AsyncMock(
            return_value=[invoice("inv_platform", "platform"), invoice("inv_vendor", "vendor")]
        )
        repository.download_url = MagicMock(side_effect=lambda invoice_id: f"https://api/{invoice_id}/download")

        url = await InvoiceReportingUseCase(repository).invoice_download_url("ord_1")

        assert url == "https://api/inv_vendor/download"

    @pytest.mark.asyncio
    async def test_download_url_without_invoices(self):
        repository = MagicMock()
        repository.get_order_invoices = AsyncMock(return_value=[])

        assert await InvoiceReportingUseCase(repository).invoice_download_url("ord_1") is None

    @pytest.mark.asyncio
    async def test_download_url_falls_back_to_pdf(self):
        repository = MagicMock()
        repository.get_order_invoices = AsyncMock(
            return_value=[invoice("", "platform", "https://cdn/inv.pdf")]
        )

        assert await InvoiceReportingUseCase(repository).invoice_download_url("ord_1") == "https://cdn/inv.pdf"


class TestRateLimitMonitoringUseCase:
    """Test blocked IP administration"""

    @pytest.mark.asyncio
    async def test_release_encodes_ip_and_refetches(self, make_client):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append((request.method, request.url.raw_path.decode()))
            if request.method == "GET":
                return httpx.Response(200, json={"success": True, "data": []})
            return httpx.Response(200, json={"success": True, "message": "released"})

        client = make_client(handler)
        notifier = Notifier()
        monitor = RateLimitMonitoringUseCase(HttpRateLimitRepository(client), notifier)

        assert await monitor.release("2001:db8::1") is True

        assert requests == [
            ("POST", "/admin/rate-limits/release/2001%3Adb8%3A%3A1"),
            ("GET", "/admin/rate-limits/blocked-ips"),
        ]
        assert notifier.last.level is NotificationLevel.SUCCESS
        await client.aclose()

    @pytest.mark.asyncio
    async def test_refresh_failure_is_notified(self):
        repository = MagicMock()
        repository.get_blocked_ips = AsyncMock(side_effect=NetworkError("down"))
        notifier = Notifier()
        monitor = RateLimitMonitoringUseCase(repository, notifier)

        assert await monitor.refresh() is False
        assert monitor.blocked_ips == []
        assert notifier.last.level is NotificationLevel.ERROR

    @pytest.mark.asyncio
    async def test_clear_all(self):
        repository = MagicMock()
        repository.clear_all = AsyncMock()
        repository.get_blocked_ips = AsyncMock(return_value=[])
        monitor = RateLimitMonitoringUseCase(repository, Notifier())

        assert await monitor.clear_all() is True
        repository.clear_all.assert_awaited_once()
        repository.get_blocked_ips.assert_awaited_once()
