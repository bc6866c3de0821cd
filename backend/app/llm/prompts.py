"""Prompts for the narrative travel advice."""

from backend.app.models.plan import PlanRequest

SYSTEM_PROMPT = (
    "You are a knowledgeable travel advisor specializing in international border "
    "crossings, visa requirements, and travel documentation. Provide clear, accurate, "
    "and up-to-date information."
)


def build_user_prompt(request: PlanRequest) -> str:
    """Build the user prompt for one plan request."""
    return (
        f"You're a border-crossing expert. A {request.citizenship} citizen with "
        f"{request.residency_status} status wants to travel from "
        f"{request.departure_location} to {request.destination_location} "
        f"by {request.transport_mode.value}. Provide a personalized travel plan detailing "
        "crossing methods, required documents, and key considerations. Format your "
        "response in clear sections with practical, actionable advice, and include a "
        '"Required Documents" section as a bulleted list.'
    )
