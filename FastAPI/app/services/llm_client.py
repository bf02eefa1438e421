import json
import logging
import re

import boto3
from botocore.config import Config

from app.config import settings

logger = logging.getLogger(__name__)


def _call_bedrock_llm(prompt: str, timeout: float | None = None, max_tokens: int = 800) -> str:
    """Call Bedrock LLM via converse API and return response text."""
    timeout = timeout or settings.llm_timeout_seconds
    try:
        client = boto3.client(
            "bedrock-runtime",
            region_name=settings.aws_region,
            config=Config(read_timeout=int(timeout), connect_timeout=10),
        )
        model_ids = [settings.bedrock_llm_model_id]
        # Common typo safety: "ministral" -> "mistral".
        if "ministral" in settings.bedrock_llm_model_id:
            model_ids.append(settings.bedrock_llm_model_id.replace("ministral", "mistral"))

        last_err = None
        response = None
        for model_id in model_ids:
            try:
                response = client.converse(
                    modelId=model_id,
                    messages=[{"role": "user", "content": [{"text": prompt}]}],
                    inferenceConfig={"maxTokens": max_tokens, "temperature": 0.2},
                )
                break
            except Exception as e:
                last_err = e
                logger.warning("Bedrock LLM model attempt failed: model=%s err=%s", model_id, e)
        if response is None and last_err is not None:
            raise last_err

        blocks = (response.get("output") or {}).get("message", {}).get("content", [])
        text = "".join(b.get("text", "") for b in blocks if isinstance(b, dict)).strip()
        logger.debug("Bedrock LLM response length=%d", len(text))
        return text
    except Exception as e:
        logger.warning("Bedrock LLM call failed: %s", e)
        raise


def is_llm_enabled() -> bool:
    """Whether Bedrock LLM is enabled."""
    return bool(settings.bedrock_llm_enabled and settings.bedrock_llm_model_id and settings.aws_region)


def _extract_json_object(text: str) -> dict | None:
    clean = re.sub(r"^```(?:json)?\s*", "", text or "", flags=re.IGNORECASE).strip()
    clean = re.sub(r"\s*```$", "", clean).strip()
    try:
        obj = json.loads(clean)
        return obj if isinstance(obj, dict) else None
    except json.JSONDecodeError:
        m = re.search(r"\{[\s\S]*\}", clean)
        if not m:
            return None
        try:
            obj = json.loads(m.group(0))
        except json.JSONDecodeError:
            return None
        return obj if isinstance(obj, dict) else None


SHORTLIST_DECISIONS = ("Strong Yes", "Maybe", "Reject")


def shortlist_decision_for(score: float) -> str:
    """Map a 0-1 match score onto the recruiter shortlist buckets."""
    if score >= 0.75:
        return "Strong Yes"
    if score >= 0.5:
        return "Maybe"
    return "Reject"


def _string_list(value) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(s).strip() for s in value if str(s or "").strip()]


def llm_match_candidate(resume_text: str, job_description: str) -> dict:
    """
    Score one queued candidate against a job description.

    Returns match_score (0-1), match_reason, missing_skills, shortlist_decision,
    top_strengths and red_flags. Raises ValueError when the reply carries no
    usable numeric score so callers can fall back to keyword scoring.
    """
    prompt = f"""You are a senior technical recruiter screening candidates in a review queue. Use ONLY the resume text. Do not guess.

Compare the candidate to the job description and return ONLY JSON:
{{"match_score": number 0-100, "match_reason": string (max 2 sentences), "missing_skills": [string],
"shortlist_decision": "Strong Yes" | "Maybe" | "Reject", "top_strengths": [string], "red_flags": [string]}}

Scoring guide:
- 80-100: meets nearly all must-have skills with direct work evidence
- 50-79: meets most must-haves, some gaps
- 0-49: major gaps in required skills or seniority

RESUME:
<<<{resume_text}>>>

JOB DESCRIPTION:
<<<{job_description}>>>"""

    text = _call_bedrock_llm(prompt)
    obj = _extract_json_object(text)
    if obj is None:
        score_match = re.search(r'"match_score"\s*:\s*([0-9]+(?:\.[0-9]+)?)', text, re.IGNORECASE)
        if not score_match:
            raise ValueError("LLM response has no match_score")
        reason_match = re.search(r'"match_reason"\s*:\s*"([^"]+)"', text, re.IGNORECASE)
        obj = {
            "match_score": score_match.group(1),
            "match_reason": reason_match.group(1) if reason_match else "",
        }

    raw_score = obj.get("match_score")
    if raw_score is None or isinstance(raw_score, bool):
        raise ValueError(f"LLM response has no numeric match_score: {raw_score!r}")
    try:
        score = float(raw_score)
    except (TypeError, ValueError) as e:
        raise ValueError(f"LLM match_score is not a number: {raw_score!r}") from e
    if score != score:  # NaN
        raise ValueError("LLM match_score is NaN")

    # The prompt asks for 0-100, so a 1 means 1%, not a perfect match.
    score = max(0.0, min(1.0, score / 100.0))

    decision = str(obj.get("shortlist_decision") or "").strip()
    if decision not in SHORTLIST_DECISIONS:
        decision = shortlist_decision_for(score)

    return {
        "match_score": score,
        "match_reason": str(obj.get("match_reason") or "").strip() or "No reason given by LLM",
        "missing_skills": _string_list(obj.get("missing_skills")),
        "shortlist_decision": decision,
        "top_strengths": _string_list(obj.get("top_strengths")),
        "red_flags": _string_list(obj.get("red_flags")),
    }
