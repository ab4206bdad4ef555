import logging
from contextlib import asynccontextmanager
from typing import Dict, Optional
from uuid import UUID

from fastapi import Depends, FastAPI, HTTPException, Request

from .bank_gateway import HttpBankGateway
from .config import Settings, get_settings
from .datamodels import PaymentRequest, PaymentRequestValidator, PaymentResponse
from .logging_config import configure_logging
from .payment_database import InMemoryPaymentDatabase
from .payment_processor import PaymentProcessor

logger = logging.getLogger(__name__)

INVALID_REQUEST_DETAIL = "Some field(s) on the request are not in correct format"
PROCESS_ERROR_DETAIL = "An unexpected error occurred while processing the payment."
FETCH_ERROR_DETAIL = "An unexpected error occurred while fetching requested payment."


def get_payment_processor(request: Request) -> PaymentProcessor:
    return request.app.state.payment_processor


def create_app(
    settings: Optional[Settings] = None,
    payment_processor: Optional[PaymentProcessor] = None,
) -> FastAPI:
    """
    Build the FastAPI application.
    When no processor is given, one is wired with an HttpBankGateway pointed at
    settings.bank_base_url and a fresh in-memory database.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    bank_gateway = None
    if payment_processor is None:
        bank_gateway = HttpBankGateway(
            settings.bank_base_url, timeout=settings.bank_timeout_seconds
        )
        payment_processor = PaymentProcessor(bank_gateway, InMemoryPaymentDatabase())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if bank_gateway is not None:
            bank_gateway.close()

    app = FastAPI(title="Payment Gateway", lifespan=lifespan)
    app.state.payment_processor = payment_processor

    @app.get("/")
    def ping() -> Dict[str, str]:
        return {"app": "payment-gateway"}

    """
    This endpoint is used to create a payment.
    Parameters:
    - payment_request: PaymentRequest
    Returns:
    - PaymentResponse (Authorized, Declined or Rejected)
    Exceptions:
    - HTTPException: 400 Bad Request when the request fails validation
    - HTTPException: 500 Internal Server Error
    """
    # POST /payments
    @app.post("/payments")
    def create_payment(
        payment_request: PaymentRequest,
        processor: PaymentProcessor = Depends(get_payment_processor),
    ) -> PaymentResponse:
        if not PaymentRequestValidator.validate_payment_request(payment_request):
            logger.info("Payment request failed pre-validation")
            raise HTTPException(status_code=400, detail=INVALID_REQUEST_DETAIL)

        try:
            result = processor.process_payment(
                payment_request.card_number,
                payment_request.expiry_month,
                payment_request.expiry_year,
                payment_request.currency,
                payment_request.amount,
                payment_request.cvv,
            )
        except Exception:
            logger.exception("Unexpected error while processing payment")
            raise HTTPException(status_code=500, detail=PROCESS_ERROR_DETAIL)

        if result.error is not None:
            raise HTTPException(status_code=400, detail=result.error)
        return PaymentResponse.from_payment(result.payment)

    """
    This endpoint is used to get the details of a payment.
    Parameters:
    - payment_id: UUID
    Returns:
    - PaymentResponse
    Exceptions:
    - HTTPException: 404 Not Found
    - HTTPException: 500 Internal Server Error
    """
    # GET /payments/{payment_id}
    @app.get("/payments/{payment_id}")
    def get_payment(
        payment_id: UUID,
        processor: PaymentProcessor = Depends(get_payment_processor),
    ) -> PaymentResponse:
        try:
            payment = processor.get_payment_details(payment_id)
        except Exception:
            logger.exception("Unexpected error while fetching payment %s", payment_id)
            raise HTTPException(status_code=500, detail=FETCH_ERROR_DETAIL)

        if payment is None:
            raise HTTPException(
                status_code=404,
                detail=f"Payment with identifier {payment_id} was not found.",
            )
        return PaymentResponse.from_payment(payment)

    return app
