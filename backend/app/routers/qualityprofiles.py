"""Quality Profiles 변경 이력 API 라우터입니다. 요청을 검증하고 서비스 레이어로 조회를 위임합니다."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.exceptions import InvalidArgumentError
from app.middleware.locale_middleware import get_locale
from app.schemas.changelog import ProfileChangelogOut
from app.services.change_record import ChangelogResult
from app.services.change_storage import ProfileChangeStorage
from app.services.changelog_loader import ChangelogLoader
from app.services.changelog_presenter import present_profile_changelog
from app.services.changelog_query import build_changelog_query
from app.services.diff_formatter import DiffFormatter
from app.services.i18n_service import I18n
from app.services.lookup_service import RuleLookup, UserLookup
from app.services.profile_service import ProfileRef, ProfileResolver

router = APIRouter(prefix="/api/qualityprofiles", tags=["qualityprofiles"])


def _page_bounds(p: Optional[int], ps: Optional[int]):
    page_index = 1 if p is None else p
    page_size = settings.CHANGELOG_DEFAULT_PAGE_SIZE if ps is None else ps
    if page_index < 1:
        raise InvalidArgumentError("'p'는 1 이상이어야 합니다.")
    if page_size < 1 or page_size > settings.CHANGELOG_MAX_PAGE_SIZE:
        raise InvalidArgumentError(f"'ps'는 1 이상 {settings.CHANGELOG_MAX_PAGE_SIZE} 이하여야 합니다.")
    return page_index, page_size


@router.get("/changelog", response_model=ProfileChangelogOut, response_model_exclude_none=True)
def profile_changelog(
    profileKey: Optional[str] = Query(None),
    language: Optional[str] = Query(None),
    profileName: Optional[str] = Query(None),
    since: Optional[str] = Query(None),
    to: Optional[str] = Query(None),
    p: Optional[int] = Query(None),
    ps: Optional[int] = Query(None),
    locale: str = Depends(get_locale),
    db: Session = Depends(get_db),
):
    # 잘못된 인자는 저장소 조회 전에 거부된다.
    ref = ProfileRef.from_params(profileKey, language, profileName)
    query = build_changelog_query(ref, since, to)
    page_index, page_size = _page_bounds(p, ps)

    user_lookup = UserLookup(db)
    rule_lookup = RuleLookup(db)
    loader = ChangelogLoader(ProfileResolver(db), ProfileChangeStorage(db), user_lookup, rule_lookup)
    result = loader.load(query)

    offset = (page_index - 1) * page_size
    page = ChangelogResult(total=result.total, changes=result.changes[offset:offset + page_size])
    formatter = DiffFormatter(I18n(), rule_lookup=rule_lookup, user_lookup=user_lookup)
    return present_profile_changelog(page, formatter, locale, page_index, page_size)
