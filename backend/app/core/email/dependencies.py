from typing import Annotated
from fastapi import Depends, Request

from app.core.email.email import Mailer


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


MailerDep = Annotated[Mailer, Depends(get_mailer)]
