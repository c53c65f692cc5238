"""
Dependency Injection Container

Manages the instantiation and lifecycle of dependencies for Clean Architecture.
"""

import logging
from typing import Any, Dict, Optional

from ...application.use_cases.account_use_case import AccountUseCase
from ...application.use_cases.admin_monitoring_use_case import (
    InvoiceReportingUseCase,
    RateLimitMonitoringUseCase,
)
from ...application.use_cases.cart_management_use_case import CartManagementUseCase
from ...application.use_cases.order_status_management_use_case import (
    OrderStatusManagementUseCase,
)
from ...application.use_cases.payment_checkout_use_case import PaymentCheckoutUseCase
from ...application.use_cases.product_catalog_use_case import ProductCatalogUseCase
from ...domain.repositories.session_store import SessionStore
from ..configuration.config import Settings, get_config
from ..http.backend_client import BackendClient
from ..http.request_tracker import RequestTracker
from ..repositories.http_account_repository import HttpAccountRepository
from ..repositories.http_admin_repository import HttpInvoiceRepository, HttpRateLimitRepository
from ..repositories.http_cart_repository import HttpCartRepository
from ..repositories.http_catalog_repository import HttpCatalogRepository
from ..repositories.http_order_repository import HttpOrderRepository
from ..repositories.http_payment_repository import HttpPaymentRepository
from ..repositories.session_stores import JsonFileSessionStore
from ..services.notification_service import Notifier
from ..services.payment_widget import PaymentWidget

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency injection container for Clean Architecture

    Manages the instantiation and lifecycle of:
    - The backend client and session store (Infrastructure layer)
    - Repositories (Infrastructure layer)
    - Use Cases (Application layer)

    Vendor-scoped use cases are created on demand by the ``create_*`` methods.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        *,
        session_store: Optional[SessionStore] = None,
        notifier: Optional[Notifier] = None,
        transport: Any = None,
    ):
        self._config = config or get_config()
        self._instances: Dict[str, Any] = {}
        self._logger = logging.getLogger(self.__class__.__name__)
        self._session_store = session_store
        self._notifier = notifier
        self._transport = transport
        self._setup_dependencies()

    def _setup_dependencies(self):
        """Setup all dependencies and their relationships"""
        self._logger.info("Setting up dependency injection container...")

        # Infrastructure Layer - HTTP access
        self._register_infrastructure()

        # Infrastructure Layer - Repositories
        self._register_repositories()

        # Application Layer - Use Cases
        self._register_use_cases()

        self._logger.info("Dependency injection container setup complete")

    def _register_infrastructure(self):
        """Register the backend client and its collaborators"""
        self._instances["session_store"] = self._session_store or JsonFileSessionStore(
            self._config.session_file
        )
        self._instances["notifier"] = self._notifier or Notifier()
        self._instances["request_tracker"] = RequestTracker()
        self._instances["backend_client"] = BackendClient(
            self._config.backend_url,
            session_store=self.get_session_store(),
            tracker=self.get_request_tracker(),
            timeout=self._config.http_timeout_seconds,
            transport=self._transport,
        )

        self._logger.debug("Infrastructure registered successfully")

    def _register_repositories(self):
        """Register repository implementations"""
        client = self.get_backend_client()
        self._instances["cart_repository"] = HttpCartRepository(client)
        self._instances["order_repository"] = HttpOrderRepository(client)
        self._instances["payment_repository"] = HttpPaymentRepository(
            client, fallback_key=self._config.razorpay_key_id
        )
        self._instances["catalog_repository"] = HttpCatalogRepository(client)
        self._instances["account_repository"] = HttpAccountRepository(client)
        self._instances["invoice_repository"] = HttpInvoiceRepository(client)
        self._instances["rate_limit_repository"] = HttpRateLimitRepository(client)

        self._logger.debug("Repositories registered successfully")

    def _register_use_cases(self):
        """Register use cases that are not scoped to a vendor"""
        self._instances["account_use_case"] = AccountUseCase(
            account_repository=self._instances["account_repository"],
            session_store=self.get_session_store(),
        )

        self._instances["product_catalog_use_case"] = ProductCatalogUseCase(
            catalog_repository=self._instances["catalog_repository"],
            default_packing_charge=self._config.default_packing_charge,
            default_delivery_charge=self._config.default_delivery_charge,
        )

        self._instances["invoice_reporting_use_case"] = InvoiceReportingUseCase(
            invoice_repository=self._instances["invoice_repository"]
        )

        self._instances["rate_limit_monitoring_use_case"] = RateLimitMonitoringUseCase(
            rate_limit_repository=self._instances["rate_limit_repository"],
            notifier=self.get_notifier(),
            refresh_seconds=self._config.rate_limit_refresh_seconds,
        )

        self._logger.debug("Use cases registered successfully")

    # Vendor-scoped factories
    def create_cart_management_use_case(self, vendor_id: str) -> CartManagementUseCase:
        """Create a cart use case for one vendor counter"""
        return CartManagementUseCase(self._instances["cart_repository"], vendor_id)

    def create_payment_checkout_use_case(
        self, cart_management: CartManagementUseCase, widget: PaymentWidget
    ) -> PaymentCheckoutUseCase:
        """Create a checkout flow over an existing cart use case"""
        return PaymentCheckoutUseCase(
            payment_repository=self._instances["payment_repository"],
            order_repository=self._instances["order_repository"],
            cart_management=cart_management,
            widget=widget,
            notifier=self.get_notifier(),
            currency=self._config.currency,
        )

    def create_order_status_management_use_case(
        self, vendor_id: str
    ) -> OrderStatusManagementUseCase:
        """Create the order list views for one vendor"""
        return OrderStatusManagementUseCase(
            order_repository=self._instances["order_repository"],
            vendor_id=vendor_id,
            notifier=self.get_notifier(),
            active_refresh_seconds=self._config.active_orders_refresh_seconds,
            past_refresh_seconds=self._config.past_orders_refresh_seconds,
        )

    # Infrastructure getters
    def get_config(self) -> Settings:
        """Get the settings the container was built with"""
        return self._config

    def get_session_store(self) -> SessionStore:
        """Get session store instance"""
        return self._instances["session_store"]

    def get_notifier(self) -> Notifier:
        """Get notifier instance"""
        return self._instances["notifier"]

    def get_request_tracker(self) -> RequestTracker:
        """Get request tracker instance"""
        return self._instances["request_tracker"]

    def get_backend_client(self) -> BackendClient:
        """Get backend client instance"""
        return self._instances["backend_client"]

    # Use Case getters
    def get_account_use_case(self) -> AccountUseCase:
        """Get account use case instance"""
        return self._instances["account_use_case"]

    def get_product_catalog_use_case(self) -> ProductCatalogUseCase:
        """Get product catalog use case instance"""
        return self._instances["product_catalog_use_case"]

    def get_invoice_reporting_use_case(self) -> InvoiceReportingUseCase:
        """Get invoice reporting use case instance"""
        return self._instances["invoice_reporting_use_case"]

    def get_rate_limit_monitoring_use_case(self) -> RateLimitMonitoringUseCase:
        """Get rate limit monitoring use case instance"""
        return self._instances["rate_limit_monitoring_use_case"]

    async def aclose(self):
        """Release the HTTP connection pool"""
        await self.get_backend_client().aclose()


# Global container instance
_container: Optional[DependencyContainer] = None


def get_container() -> DependencyContainer:
    """Get the global dependency container"""
    global _container  # pylint: disable=global-statement
    if _container is None:
        _container = DependencyContainer()
    return _container


async def reset_container():
    """Reset the global container (useful for testing)"""
    global _container  # pylint: disable=global-statement
    if _container:
        await _container.aclose()
    _container = None
