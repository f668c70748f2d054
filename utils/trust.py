from flask import current_app
from sqlalchemy import case, update

from models import db
from models.user import User


def decrement_trust_on_cancel(booking):
    """Lower the customer's trust score; runs inside the cancellation transaction."""
    penalty = current_app.config.get("TRUST_SCORE_CANCEL_PENALTY", 5)
    db.session.execute(
        update(User)
        .where(User.id == booking.user_id)
        .values(trust_score=case(
            (User.trust_score > penalty, User.trust_score - penalty),
            else_=0,
        ))
        .execution_options(synchronize_session=False)
    )
