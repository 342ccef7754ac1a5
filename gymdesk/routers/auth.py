from fastapi import APIRouter, HTTPException

from gymdesk.dependencies import ResolverDep, failure
from gymdesk.models import Student, Teacher, User
from gymdesk.schemas import LoginBody, StudentRead, TeacherRead

router = APIRouter()


def user_read(user: User) -> TeacherRead | StudentRead:
    match user:
        case Teacher():
            return TeacherRead.model_validate(user, from_attributes=True)
        case Student():
            return StudentRead.model_validate(user, from_attributes=True)


@router.post("/login", response_model=TeacherRead | StudentRead)
def login(body: LoginBody, resolver: ResolverDep):
    if not resolver.login(body.email, body.password):
        raise failure(resolver)
    return user_read(resolver.current_user())


@router.post("/logout", status_code=204)
def logout(resolver: ResolverDep):
    resolver.logout()


@router.get("/me", response_model=TeacherRead | StudentRead)
def me(resolver: ResolverDep):
    user = resolver.current_user()
    if user is None:
        raise HTTPException(status_code=401, detail="Not logged in")
    return user_read(user)
