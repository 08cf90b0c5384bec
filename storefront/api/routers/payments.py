# storefront/api/routers/payments.py
from fastapi import APIRouter, Header, HTTPException, Request
from fastapi.responses import JSONResponse

from storefront.domain.errors import PaymentDeclined, PaymentGatewayError, ValidationFailed
from storefront.domain.schemas import PaymentIntentIn
from storefront.services.payment_service import PaymentService

router = APIRouter(tags=["payments"])


@router.post("/create-payment-intent")
def create_payment_intent(
    payload: PaymentIntentIn,
    request: Request,
    idempotency_key: str | None = Header(default=None, alias="Idempotency-Key"),
):
    svc = PaymentService(intents=request.app.state.payment_intents)
    try:
        return svc.create_payment_intent(payload, idempotency_key=idempotency_key)
    except PaymentDeclined as e:
        return JSONResponse(status_code=400, content={"error": str(e), "status": e.status})
    except ValidationFailed as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PaymentGatewayError as e:
        raise HTTPException(status_code=500, detail=str(e))
