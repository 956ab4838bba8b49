"""
Prompt builders for the analysis endpoints.

Every builder that takes `language` switches the output-language
instruction (and the section headers the model must use) between English
and Simplified Chinese ("cn").
"""

from __future__ import annotations

from typing import Any

POST_HEADERS = {
    "en": (
        "1. Visual Context & Atmosphere",
        "2. Subtext & Hidden Signals",
        "3. Target Audience & Directionality",
        "4. Persona & Impression Management",
        "5. Motivation & Strategic Verdict",
    ),
    "cn": (
        "1. 视觉语境与氛围解码",
        "2. 潜台词与深层信号",
        "3. 目标受众与指向性",
        "4. 人设与印象管理",
        "5. 动机与博弈评估",
    ),
}

CHAT_LOG_HEADERS = {
    "en": (
        "1. Executive Diagnosis",
        "2. Deep Behavioral Decoding",
        "3. Key Dynamics",
        "4. Strategic Calibration",
        "5. Tactical Playbook",
        "6. Consultant's Verdict",
    ),
    "cn": (
        "1. 核心诊断",
        "2. 深度行为解码",
        "3. 关键互动",
        "4. 战略优化",
        "5. 战术手册",
        "6. 分析师结语",
    ),
}

PERSONALITY_HEADERS = {
    "en": ("1. The Archetype", "2. The Big Five Dimensions", "3. Deep Psychological Decoding"),
    "cn": ("1. 核心原型", "2. 五维人格模型", "3. 深度心理侧写"),
}


def is_chinese(language: str | None) -> bool:
    return (language or "").strip().lower() == "cn"


def _lang_key(language: str | None) -> str:
    return "cn" if is_chinese(language) else "en"


def language_instruction(language: str | None, *, strict: bool = True) -> str:
    if not is_chinese(language):
        return "Respond in English."
    if strict:
        return "Respond in STRICT Simplified Chinese (简体中文). DO NOT use English in the output."
    return "Respond in Simplified Chinese (简体中文)."


def classify_prompt() -> str:
    return (
        "You are an expert UI/UX analyst for Asian social apps (WeChat, RedNote, Instagram).\n"
        "Analyze the COLLECTION of screenshots provided as a single dataset.\n\n"
        "MISSION:\n"
        "1. Determine the DOMINANT screen type across all images.\n"
        "2. Extract the TARGET USER'S profile info by synthesizing text from all images.\n\n"
        "CLASSIFICATION RULES (priority order):\n"
        '1. "CHAT": speech bubbles, alternating rows, bottom input bar.\n'
        '2. "PROFILE": large avatar + bio + stats at the top, vertical list of posts.\n'
        '3. "POST": focused view of ONE main post with comments.\n'
        '4. "UNKNOWN": fallback for unclear images.\n\n'
        "EXTRACTION TASK:\n"
        "- NAME: look for the username.\n"
        "- BIO/INFO: scan all images for age, occupation or bio text.\n"
        "- AVATAR: identify the TARGET USER'S avatar (not the app owner's). Return avatarBox "
        "[ymin, xmin, ymax, xmax] on a 0-1000 grid and avatarSourceIndex, the 0-based index of "
        "the image containing the best avatar.\n\n"
        "OUTPUT FORMAT (JSON ONLY):\n"
        "{\n"
        '  "type": "CHAT" | "POST" | "PROFILE" | "UNKNOWN",\n'
        '  "avatarBox": [int, int, int, int] or null,\n'
        '  "avatarSourceIndex": int,\n'
        '  "extractedProfile": {"name": "string", "gender": "Female" | "Male" | "Unknown", '
        '"age": "string", "occupation": "string", "bio": "string"}\n'
        "}"
    )


def profile_overview_prompt(url: str, language: str | None) -> str:
    return (
        "You are an elite digital forensic psychologist and profiler.\n"
        f"Analyze the provided social media screenshots and context: {url}.\n\n"
        f"IMPORTANT: {language_instruction(language, strict=False)}\n"
        'MISSION: Decode the "impression management" strategy of this profile.\n'
        "TONE: Surgical, incisive, clinical but emotionally deep.\n"
        "For sections 1-4 write a concise but deep analysis (about 150-200 words each).\n\n"
        "1. Surface vs. Subtext: decode the visual semiotics and what they signal.\n"
        "2. Target Audience: who is this performance designed for?\n"
        "3. Persona & Impression: name the character, infer Big Five traits, analyze the shadow self.\n"
        "4. Performance & Purpose: what emotional currency are they farming?\n"
        "5. Suggested Replies: 3 distinct, high-EQ opening DMs based on this analysis.\n\n"
        "RESPONSE FORMAT (JSON ONLY):\n"
        "{\n"
        '  "platform": "string", "handle": "string", "timeframe": "string",\n'
        '  "reportTags": ["string"], "surfaceSubtext": "string", "targetAudience": "string",\n'
        '  "personaImpression": "string", "performancePurpose": "string",\n'
        '  "suggestedReplies": ["string"]\n'
        "}"
    )


def post_prompt(content: str, language: str | None) -> str:
    h1, h2, h3, h4, h5 = POST_HEADERS[_lang_key(language)]
    prompt = (
        "You are an expert social dynamics analyst and psychologist.\n"
        f"IMPORTANT: {language_instruction(language)}\n\n"
        "MISSION: Perform a deep, expansive analysis of the provided social media post.\n"
        "Do NOT just describe the image. Interpret WHY it was posted.\n"
        "TONE: Perceptive, witty, insightful and empathetic.\n\n"
        "ANALYSIS STRUCTURE (markdown inside the JSON 'analysis' field):\n"
        f"### {h1}\n[Environment, lighting, chaos vs order. About 250-300 words.]\n"
        f"### {h2}\n[Friction between the visual and the textual. 250-300 words.]\n"
        f"### {h3}\n[Profile the hidden audience. 250-300 words.]\n"
        f"### {h4}\n[Define the persona construction. 250-300 words.]\n"
        f"### {h5}\n[Strategic summary. About 150 words.]\n\n"
        "REPLY GENERATION: generate 3 distinct replies: a playful challenge, a resonator that "
        "validates the hidden emotion, and a low-friction curiosity hook.\n\n"
        "OUTPUT JSON:\n"
        "{\n"
        '  "analysis": "string (the markdown analysis)",\n'
        '  "suggestedReplies": ["string", "string", "string"],\n'
        '  "tags": ["#Tag1", "#Tag2", "#RiskLevel:High/Low"]\n'
        "}"
    )
    if content:
        return f'Caption: "{content}"\n\n{prompt}'
    return prompt


def chat_log_prompt(target: Any, user: Any, context: Any, language: str | None) -> str:
    headers = CHAT_LOG_HEADERS[_lang_key(language)]
    case_file = []
    if target.name:
        case_file.append(
            f"- Target: {target.name} ({target.age or '?'} / {target.gender or '?'} / {target.occupation or '?'})"
        )
    if user.name:
        case_file.append(f"- User: {user.name} ({user.occupation or '?'})")
    if context.stage:
        case_file.append(f"- Stage: {context.stage}")
    if context.duration:
        case_file.append(f"- Duration: {context.duration}")
    case_file.append(f"- Goal: {context.goal or 'Not specified'}")

    return (
        "You are an expert clinical relationship psychologist and behavioral profiler.\n"
        f"IMPORTANT: {language_instruction(language)}\n\n"
        "MISSION: Do not just summarize the conversation. Interpret the subtext and identify the "
        '"unspoken contract".\n'
        "TONE: Professional, objective, honest, high-resolution.\n\n"
        "--- CASE FILE ---\n"
        + "\n".join(case_file)
        + "\n\n--- CHAT LOGS ---\n"
        f'"{context.chat_logs}"\n\n'
        "RULES:\n"
        "1. Subtext over text: focus on latency, investment and tone shifts.\n"
        "2. Honesty: if the dynamic is unbalanced, say so clearly.\n"
        "3. Evidence-based: cite specific messages.\n"
        "4. Write long, dense, narrative paragraphs.\n"
        "5. Use frameworks such as anxious-avoidant, reciprocity, validation seeking.\n\n"
        "OUTPUT STRUCTURE (JSON ONLY):\n"
        "{\n"
        '  "compatibilityScore": 0,\n'
        '  "statusAssessment": "string",\n'
        '  "partnerPersonalityAnalysis": "string",\n'
        '  "greenFlags": ["string"], "redFlags": ["string"],\n'
        '  "communicationDos": ["string"], "communicationDonts": ["string"],\n'
        '  "magicTopics": ["string"],\n'
        f'  "strategy": "markdown with headers ### {headers[0]} through ### {headers[-1]}",\n'
        '  "dateIdeas": [{"title": "string", "description": "string"}],\n'
        '  "tags": ["#Tag"]\n'
        "}"
    )


def _pick(record: dict[str, Any], camel: str, snake: str) -> Any:
    value = record.get(camel)
    return value if value else record.get(snake)


def intelligence_context(
    social_history: list[dict[str, Any]],
    post_history: list[dict[str, Any]],
    consultation_history: list[dict[str, Any]],
) -> str:
    """
    Summarize earlier analyses of the same person for the personality prompt.

    History rows may come from the client (camelCase) or straight from the
    database (snake_case).
    """
    parts: list[str] = []
    if social_history:
        latest = social_history[-1]
        parts.append(
            "[[INTELLIGENCE SOURCE 1: LATEST SOCIAL PROFILE ANALYSIS]]\n"
            f"Platform: {latest.get('platform')}\n"
            f"Handle: {latest.get('handle')}\n"
            f"Core Impression: {_pick(latest, 'personaImpression', 'persona_impression')}\n"
            f"Hidden Subtext: {_pick(latest, 'surfaceSubtext', 'surface_subtext')}\n"
            f"Underlying Motivation: {_pick(latest, 'performancePurpose', 'performance_purpose')}"
        )
    if post_history:
        posts = "\n---\n".join(
            f"Content: \"{post.get('content')}\"\nPsychological Decode: {post.get('analysis')}"
            for post in post_history[-2:]
        )
        parts.append(f"[[INTELLIGENCE SOURCE 2: RECENT MICRO-BEHAVIORS (POSTS)]]\n{posts}")
    if consultation_history:
        latest = consultation_history[-1]
        parts.append(
            "[[INTELLIGENCE SOURCE 3: PREVIOUS RELATIONSHIP DIAGNOSIS]]\n"
            f"Status: {_pick(latest, 'statusAssessment', 'status_assessment')}\n"
            f"Observed Traits: {_pick(latest, 'partnerPersonalityAnalysis', 'partner_personality_analysis')}\n"
            f"Recommended Strategy: {latest.get('strategy')}"
        )
    return "\n\n".join(parts)


def personality_prompt(
    profile: Any,
    *,
    deep_context: str,
    avatar_analysis: str | None,
    supplementary_info: str | None,
    language: str | None,
) -> str:
    archetype, big_five, decoding = PERSONALITY_HEADERS[_lang_key(language)]
    return (
        "You are a master psychological profiler (clinical and data-driven).\n"
        f'MISSION: Construct a high-precision, deep-dive personality profile for "{profile.name}".\n\n'
        f"IMPORTANT: {language_instruction(language)}\n\n"
        "INPUT DATA:\n"
        f"- Basic Info: {profile.age}, {profile.occupation}\n"
        f'- Bio: "{profile.bio}"\n'
        f"- Social Links: {profile.social_links or 'None'}\n"
        f'- User Notes: "{supplementary_info or "None"}"\n'
        f"- Avatar Vibe: {avatar_analysis or 'N/A'}\n\n"
        f"{deep_context}\n\n"
        "CORE DIRECTIVE:\n"
        "- SYNTHESIZE the intelligence sources above.\n"
        '- THE "PAIN GAP": analyze the psychological cost of their mask.\n'
        "- CONSISTENCY: numeric scores must agree with the narrative.\n\n"
        "REQUIRED OUTPUT STRUCTURE:\n"
        "1. The 'summary' field MUST contain these three headers:\n"
        f"   ### {archetype}\n   [Name their archetype with a powerful narrative summary.]\n"
        f"   ### {big_five}\n   [Analyze their Big Five traits based on evidence.]\n"
        f"   ### {decoding}\n   [300-400 words of deep psychological narrative.]\n"
        "2. The 'datingAdvice' field: actionable strategy using **bold labels** instead of headers.\n\n"
        "RESPONSE FORMAT (JSON ONLY):\n"
        "{\n"
        '  "bigFive": {"openness": 0-100, "conscientiousness": 0-100, "extraversion": 0-100, '
        '"agreeableness": 0-100, "neuroticism": 0-100},\n'
        '  "mbti": "string", "emotionalStability": 0-100, "coreInterests": ["string"],\n'
        '  "communicationStyle": "string", "summary": "string", "datingAdvice": "string",\n'
        '  "avatarAnalysis": "string", "dataSufficiency": 0-100, "tags": ["#Tag"]\n'
        "}"
    )


def avatar_prompt(name: str) -> str:
    return (
        "You are an expert psychologist and vibe reader.\n"
        f"Analyze this avatar for {name}.\n"
        "What does this specific choice of image say about their self-perception, aesthetic and "
        "current mood? Keep it punchy, insightful and slightly witty. Max 2 sentences."
    )


def persona_reply_prompt(target: dict[str, Any], messages: list[dict[str, Any]], language: str | None) -> str:
    if is_chinese(language):
        instruction = (
            "Respond in STRICT Simplified Chinese (简体中文). "
            "The character reply AND the insight must be in Chinese."
        )
    else:
        instruction = "Respond in English."

    name = target.get("name") or "Unknown"
    report = target.get("personalityReport")
    mbti = f" (MBTI: {report.get('mbti')})" if isinstance(report, dict) and report.get("mbti") else ""
    transcript = "\n".join(f"{m.get('sender')}: {m.get('text')}" for m in messages[-5:])

    return (
        "You are a simulation engine playing two roles at once.\n\n"
        f'ROLE 1: The persona ("{name}")\n'
        f"- You are {name}, {target.get('age') or '?'} years old, {target.get('occupation') or '?'}.\n"
        f"- Personality: {target.get('bio') or ''}{mbti}\n"
        "- Reply to the user's last message naturally, staying strictly in character.\n\n"
        'ROLE 2: The dating coach (the "insight")\n'
        "- Analyze the user's last message: attractive, needy, insecure or confident?\n"
        "- Give brief, tactical advice on what the user did right or wrong.\n\n"
        f"IMPORTANT: {instruction}\n\n"
        f"Recent conversation:\n{transcript}\n\n"
        "OUTPUT FORMAT (JSON):\n"
        "{\n"
        '  "reply": "the character\'s reply (in character)",\n'
        '  "insight": "coach\'s analysis of the user\'s move"\n'
        "}"
    )
