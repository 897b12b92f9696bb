"""
Local usage example. Runs a few payments through the service with the
in-process bank simulator instead of a real acquiring bank.
"""
from payment_gateway import PaymentRepository, PaymentRequest, PaymentService
from payment_gateway.bank import BankSimulator

def run():
    service = PaymentService(bank=BankSimulator(), repository=PaymentRepository())
    # Last card digit picks the simulator outcome: odd authorizes, even declines, 0 fails
    for card_number in ("2222405343248877", "2222405343248878", "2222405343248870"):
        req = PaymentRequest(
            card_number=card_number,
            expiry_month=4,
            expiry_year=2030,
            currency="GBP",
            amount=100,
            cvv="123",
        )
        result = service.process_payment(req)
        if result.ok:
            print("Payment:", result.payment.model_dump_json())
        else:
            print("Error:", result.error.kind.value, result.error.message)

if __name__ == "__main__":
    run()
