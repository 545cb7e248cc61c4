from flashcard_api.services.auth.security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_token,
    access_token_subject,
)
from flashcard_api.services.auth.access_gate import (
    Allowed,
    Denied,
    authorize,
    trial_active,
)
from flashcard_api.services.auth.service import (
    register_user,
    authenticate_user,
    get_current_user,
    get_user_by_id,
    require_generation_access,
)
