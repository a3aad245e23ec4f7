import logging

from sqlalchemy.orm import Session

from app.config import settings
from app.models.enums import PaymentStatus
from app.models.student_semester_payment import StudentSemesterPayment

logger = logging.getLogger("app.payment")


def create_semester_payment(
    db: Session,
    student_id: int,
    academic_semester_id: int,
    total_payment_amount: int,
):
    """
    建立學期繳費紀錄；同學生同學期已存在就不重複建立 (回傳 None)。
    只 flush，不 commit：交易由呼叫端 (開學流程) 控制。
    """
    existing = (
        db.query(StudentSemesterPayment)
        .filter(
            StudentSemesterPayment.student_id == student_id,
            StudentSemesterPayment.academic_semester_id == academic_semester_id,
        )
        .first()
    )
    if existing:
        return None

    payment = StudentSemesterPayment(
        student_id=student_id,
        academic_semester_id=academic_semester_id,
        full_payment_amount=total_payment_amount,
        partial_payment_amount=int(total_payment_amount * settings.PARTIAL_PAYMENT_RATIO),
        total_due_amount=total_payment_amount,
        total_paid_amount=0,
        payment_status=PaymentStatus.PENDING,
    )
    db.add(payment)
    db.flush()

    logger.info(
        "payment created student_id=%s semester_id=%s amount=%s",
        student_id, academic_semester_id, total_payment_amount,
    )
    return payment
