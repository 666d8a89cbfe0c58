"""API views for signup, login and the current user."""

from django.core.exceptions import ValidationError
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from server.apps.accounts.decorators import token_required
from server.apps.accounts.forms import LoginForm, SignupForm
from server.apps.accounts.logic.account_operations import (
    login as login_user,
    public_user,
    signup as signup_user,
)
from server.apps.api.http import parse_json_body


@csrf_exempt
@require_POST
def signup(request: HttpRequest) -> JsonResponse:
    """Create an account: ``201 {token, user}``."""
    form = SignupForm(parse_json_body(request))
    if not form.is_valid():
        raise ValidationError(form.errors.as_data())

    token, user = signup_user(**form.cleaned_data)
    return JsonResponse({'token': token, 'user': public_user(user)}, status=201)


@csrf_exempt
@require_POST
def login(request: HttpRequest) -> JsonResponse:
    """Sign in with e-mail and password: ``200 {token, user}``."""
    form = LoginForm(parse_json_body(request))
    if not form.is_valid():
        raise ValidationError(form.errors.as_data())

    token, user = login_user(**form.cleaned_data)
    return JsonResponse({'token': token, 'user': public_user(user)})


@require_GET
@token_required
def me(request: HttpRequest) -> JsonResponse:
    """Return the authenticated user: ``200 {user}``."""
    return JsonResponse({'user': public_user(request.user)})
