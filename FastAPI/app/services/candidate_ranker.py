"""Rank the review queue against a job description. Read-only: never changes a resume."""
import json
import logging
import re
from typing import Any

from sqlalchemy.orm import Session

from app.config import settings
from app.core.errors import ValidationFailed
from app.services.llm_client import is_llm_enabled, llm_match_candidate, shortlist_decision_for
from app.services.review_workflow import Actor, get_queue

logger = logging.getLogger(__name__)

MAX_RESUME_CHARS = 8000  # Soft cap for LLM input
MIN_JOB_DESCRIPTION_CHARS = 20

STOPWORDS = {
    "and", "the", "with", "for", "from", "that", "this", "you", "your", "our", "are", "was", "were",
    "have", "has", "had", "into", "about", "over", "under", "than", "their", "them", "they",
    "will", "would", "could", "should", "must", "can", "across", "using", "use", "used",
    "experience", "project", "projects", "role", "team", "work", "worked", "years", "year",
}
TOKEN_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9_+#.-]{1,}")


def resume_to_text(content: dict[str, Any]) -> str:
    """Flatten resume content into plain text for matching."""
    if not content:
        return ""
    parts = []
    if content.get("full_name"):
        parts.append(str(content["full_name"]))
    if content.get("summary"):
        parts.append(f"Summary: {content['summary']}")

    experience = [e for e in content.get("experience") or [] if isinstance(e, dict)]
    if experience:
        parts.append("Experience:")
        for exp in experience:
            role = exp.get("role") or "Role"
            company = exp.get("company") or ""
            duration = f" ({exp['duration']})" if exp.get("duration") else ""
            parts.append(f"  - {role} at {company}{duration}")
            if exp.get("description"):
                parts.append(f"    {exp['description']}")

    skills = [s.get("name") for s in content.get("skills") or [] if isinstance(s, dict) and s.get("name")]
    if skills:
        parts.append("Skills: " + ", ".join(skills))

    projects = [p for p in content.get("projects") or [] if isinstance(p, dict)]
    if projects:
        parts.append("Projects:")
        for proj in projects:
            tech = ", ".join(proj.get("technologies") or [])
            parts.append(f"  - {proj.get('name') or 'Project'}: {proj.get('description') or ''} {tech}".rstrip())

    text = "\n".join(parts).strip()
    if len(text) > MAX_RESUME_CHARS:
        text = text[:MAX_RESUME_CHARS] + "\n[truncated]"
    return text or json.dumps(content)[:MAX_RESUME_CHARS]


def _tokens(text: str) -> set[str]:
    return {t.lower().rstrip(".") for t in TOKEN_RE.findall(text or "") if t.lower() not in STOPWORDS}


def fallback_keyword_score(resume_text: str, job_text: str) -> tuple[float, list[str]]:
    """Keyword coverage of the job text, mapped to [0.2, 0.9]. Returns (score, uncovered keywords)."""
    resume_tokens = _tokens(resume_text)
    job_tokens = _tokens(job_text)
    if not resume_tokens or not job_tokens:
        return 0.2, []
    coverage = len(resume_tokens & job_tokens) / len(job_tokens)
    score = round(0.2 + min(coverage, 1.0) * 0.7, 2)
    return score, sorted(job_tokens - resume_tokens)[:10]


def matched_keywords(resume_text: str, job_text: str) -> list[str]:
    return sorted(_tokens(resume_text) & _tokens(job_text))[:10]


def score_candidate(content: dict[str, Any], job_description: str) -> dict[str, Any]:
    resume_text = resume_to_text(content)
    if is_llm_enabled():
        try:
            result = llm_match_candidate(resume_text, job_description)
            return {**result, "match_score": round(result["match_score"] * 100), "source": "llm"}
        except Exception as e:
            logger.warning("Bedrock LLM candidate scoring failed: %s", e)

    score, missing = fallback_keyword_score(resume_text, job_description)
    return {
        "match_score": round(score * 100),
        "match_reason": "Fallback keyword overlap score (LLM unavailable).",
        "missing_skills": missing,
        "shortlist_decision": shortlist_decision_for(score),
        "top_strengths": matched_keywords(resume_text, job_description),
        "red_flags": [],
        "source": "fallback",
    }


def rank_queue(db: Session, actor: Actor, job_description: str, limit: int | None = None) -> list[dict[str, Any]]:
    """Score every queued resume against the job description, best match first."""
    job_description = (job_description or "").strip()
    if len(job_description) < MIN_JOB_DESCRIPTION_CHARS:
        raise ValidationFailed(["job_description"], f"Job description must be at least {MIN_JOB_DESCRIPTION_CHARS} characters")

    queue = get_queue(db, actor)
    limit = limit or settings.rank_queue_max_candidates
    candidates = queue[:limit]
    if len(queue) > len(candidates):
        logger.info("Ranking first %d of %d queued resumes", len(candidates), len(queue))

    ranked = []
    for resume in candidates:
        content = resume.content or {}
        result = score_candidate(content, job_description)
        ranked.append({
            "resume_id": resume.id,
            "owner_id": resume.owner_id,
            "full_name": content.get("full_name") or "",
            "version": resume.version,
            **result,
        })
    ranked.sort(key=lambda r: (-r["match_score"], r["full_name"].lower()))
    for rank, item in enumerate(ranked, start=1):
        item["rank"] = rank
    logger.info("Ranked %d queued resumes for actor=%s", len(ranked), actor.id)
    return ranked
