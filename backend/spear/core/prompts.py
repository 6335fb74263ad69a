"""
Centralized prompts for AI interactions.

Templates use ``str.format`` placeholders; literal JSON braces are doubled.
The JSON templates must ask for a bare JSON object because the response
parser expects exactly that shape.
"""

# Keys the code templates ask the model to use, in markup/style/behavior order
HTML_FIELD = "HTML Code"
CSS_FIELD = "CSS Code"
JS_FIELD = "JavaScript Code"


# Code Generation Prompt Template
GENERATION_TEMPLATE = """This is the user prompt: "{user_prompt}"

You are a coding engine. Generate **fully executable** HTML, CSS, and JavaScript code that fulfils the user prompt.

Respond with ONLY a valid JSON object in exactly this shape:
{{
  "HTML Code": "<html code>",
  "CSS Code": "<css code>",
  "JavaScript Code": "<javascript code>"
}}

Rules:
- Output the JSON object and nothing else: no explanations, no markdown, no code fences.
- Every value must be a JSON string. Use an empty string for a part that is not needed.
- Escape newlines and quotes inside values so the object stays valid JSON."""


# Code Modification Prompt Template
MODIFICATION_TEMPLATE = """Modify the following code based on the user request.

<current_html>
{html_code}
</current_html>

<current_css>
{css_code}
</current_css>

<current_javascript>
{js_code}
</current_javascript>

User Request: "{message}"

Respond with ONLY a valid JSON object containing the complete updated code in exactly this shape:
{{
  "HTML Code": "<updated html>",
  "CSS Code": "<updated css>",
  "JavaScript Code": "<updated javascript>"
}}

Rules:
- Output the JSON object and nothing else: no explanations, no markdown, no code fences.
- Return every part in full, including parts you did not change.
- Every value must be a JSON string."""


# Request Classification Prompt Template
CLASSIFICATION_TEMPLATE = """User Message: "{message}"

Carefully analyze this request. Does it require:
- "CODE_UPDATE" -> If the user asks to modify or generate HTML, CSS, or JavaScript.
- "UX_SUGGESTION" -> If the user asks for UI/UX improvement ideas (e.g., "How can I improve my design?").
- "NORMAL_CHAT" -> If it is a general conversation.

Your response must be exactly one of these words: {labels}."""


TEMPLATES = {
    "generation": GENERATION_TEMPLATE,
    "modification": MODIFICATION_TEMPLATE,
    "classification": CLASSIFICATION_TEMPLATE,
}
