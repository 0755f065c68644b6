from sqlalchemy import and_, or_
from sqlalchemy.orm import Query

from ..models.job import Job, JobLocation

_LIKE_ESCAPE = "\\"


def _contains_pattern(term: str) -> str:
    # Wildcards in user input match literally.
    escaped = (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", f"{_LIKE_ESCAPE}%")
        .replace("_", f"{_LIKE_ESCAPE}_")
    )
    return f"%{escaped}%"


def search_filters(keyword: str | None = None, location: str | None = None) -> list:
    """
    Build the WHERE clauses for a public job search.

    keyword: case-insensitive substring of title OR description OR company.
    location: case-insensitive substring of any of the job's locations.
    Both given -> both must hold. Terms are bound parameters, never spliced.
    """
    clauses = []

    keyword = (keyword or "").strip()
    if keyword:
        pattern = _contains_pattern(keyword)
        clauses.append(
            or_(
                Job.job_title.ilike(pattern, escape=_LIKE_ESCAPE),
                Job.description.ilike(pattern, escape=_LIKE_ESCAPE),
                Job.company_name.ilike(pattern, escape=_LIKE_ESCAPE),
            )
        )

    location = (location or "").strip()
    if location:
        clauses.append(Job.locations.any(JobLocation.location.ilike(_contains_pattern(location), escape=_LIKE_ESCAPE)))

    return clauses


def apply_search(q: Query, keyword: str | None = None, location: str | None = None) -> Query:
    clauses = search_filters(keyword, location)
    if clauses:
        q = q.filter(and_(*clauses))
    return q.order_by(Job.created_at.desc(), Job.id.desc())
