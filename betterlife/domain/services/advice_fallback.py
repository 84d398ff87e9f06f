"""Prompt framing and the rule-based responder used when inference is down."""

from __future__ import annotations

from betterlife.domain.entities.chat import ChatTopic


PROMPT_TEMPLATES: dict[ChatTopic, str] = {
    "diet": (
        "As a nutrition expert for Kenyan athletes, provide advice for: {query}. "
        "Consider local foods and cultural preferences."
    ),
    "mental_health": (
        "As a supportive mental health assistant for athletes, provide empathetic "
        "guidance for: {query}. Focus on wellness and suggest professional help "
        "when appropriate."
    ),
}

# Declaration order is match precedence.
KEYWORD_GROUPS: dict[ChatTopic, tuple[tuple[str, tuple[str, ...], str], ...]] = {
    "diet": (
        (
            "weight",
            ("weight", "lose", "gain"),
            "For healthy weight management, focus on balanced meals with local Kenyan foods "
            "like ugali, sukuma wiki, and lean proteins. Consider your training schedule and eat "
            "3-4 hours before intense workouts. Would you like to connect with one of our "
            "nutrition experts for a personalized plan?",
        ),
        (
            "hydration",
            ("hydration", "water", "drink"),
            "Hydration is crucial in Kenya's climate! Aim for 3-4 liters of water daily, more "
            "during training. Start your day with water, drink regularly during workouts, and "
            "include natural electrolytes from coconut water or diluted fruit juices.",
        ),
        (
            "energy",
            ("energy", "tired", "fatigue"),
            "For sustained energy, include complex carbohydrates like sweet potatoes, brown rice, "
            "and traditional grains. Combine with proteins like beans, fish, or lean meat. Eat "
            "small, frequent meals and don't skip breakfast!",
        ),
        (
            "muscle",
            ("muscle", "protein", "strength"),
            "For muscle building, aim for 1.6-2.2g protein per kg body weight. Great local "
            "sources include fish, chicken, beans, groundnuts, and milk. Spread protein intake "
            "throughout the day and include it in post-workout meals.",
        ),
        (
            "recovery",
            ("recovery", "post-workout", "after workout", "post"),
            "Post-workout nutrition is key! Within 30 minutes, have a snack with carbs and "
            "protein like a banana with groundnut butter, or milk with honey. Follow with a "
            "balanced meal within 2 hours including local foods like fish with ugali and "
            "vegetables.",
        ),
    ),
    "mental_health": (
        (
            "stress",
            ("stress", "pressure", "anxious"),
            "It's normal to feel stressed as an athlete. Try deep breathing exercises: breathe "
            "in for 4 counts, hold for 4, exhale for 6. Regular meditation, even 5 minutes daily, "
            "can help. Remember, pressure is a privilege - it means you're competing at a level "
            "that matters!",
        ),
        (
            "motivation",
            ("motivation", "unmotivated", "lazy"),
            "Motivation comes and goes, but discipline stays. Set small, achievable daily goals. "
            "Remember why you started - write it down and read it when motivation is low. Connect "
            "with your training partners or coach for support. Every champion has days like this!",
        ),
        (
            "confidence",
            ("confidence", "doubt", "believe"),
            "Self-doubt is part of growth. Focus on your preparation and past achievements. Use "
            "positive self-talk: 'I am prepared,' 'I belong here.' Visualize successful "
            "performances. Remember, confidence comes from competence - trust your training!",
        ),
        (
            "sleep",
            ("sleep", "tired", "rest"),
            "Quality sleep is crucial for athletes! Aim for 7-9 hours nightly. Create a bedtime "
            "routine: no screens 1 hour before bed, keep your room cool and dark. If racing "
            "thoughts keep you awake, try writing them down or gentle stretching.",
        ),
        (
            "injury",
            ("injury", "hurt", "pain"),
            "Dealing with injury is tough mentally. It's normal to feel frustrated or sad. Focus "
            "on what you CAN do - maybe it's time to work on other skills, study your sport, or "
            "support teammates. This setback can become a comeback story!",
        ),
        (
            "competition",
            ("competition", "performance", "race"),
            "Pre-competition nerves are normal and can actually help performance! Use them as "
            "energy. Stick to your routine, focus on your process rather than outcomes. "
            "Remember: you've trained for this moment. Trust your preparation and enjoy "
            "competing!",
        ),
    ),
}

DEFAULT_RESPONSES: dict[ChatTopic, str] = {
    "diet": (
        "I'm here to help with your nutrition questions! For Kenyan athletes, I recommend "
        "focusing on local, whole foods like ugali, sukuma wiki, sweet potatoes, beans, and "
        "fresh fruits. What specific aspect of nutrition would you like to discuss?"
    ),
    "mental_health": (
        "I'm here to support you! Remember that seeking help shows strength, not weakness. "
        "Mental health is just as important as physical health for athletes. If you're "
        "struggling, consider speaking with one of our mental health experts who understand "
        "athlete challenges."
    ),
}


def build_prompt(topic: ChatTopic, query: str) -> str:
    return PROMPT_TEMPLATES[topic].format(query=query)


def _first_matching_group(topic: ChatTopic, query: str):
    lowered = query.lower()
    for group in KEYWORD_GROUPS[topic]:
        if any(keyword in lowered for keyword in group[1]):
            return group
    return None


def match_keyword_group(topic: ChatTopic, query: str) -> str | None:
    """Return the name of the first keyword group found in ``query``."""
    group = _first_matching_group(topic, query)
    return group[0] if group is not None else None


def fallback_response(topic: ChatTopic, query: str) -> str:
    group = _first_matching_group(topic, query)
    if group is None:
        return DEFAULT_RESPONSES[topic]
    return group[2]
