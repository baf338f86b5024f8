"""
Prompt Builder

Builds the documentation improvement, rules formatting, and custom
rules prompts used by the suggestion pipeline.
"""

import logging
from dataclasses import dataclass
from typing import Optional


logger = logging.getLogger(__name__)


REASON_MARKER = "reason:"
SUGGESTION_MARKER = "suggestion:"
CUSTOM_RULES_ACKNOWLEDGEMENT = "Custom rules were applied"


RULES_FORMATTER_PROMPT = """You are a documentation rules formatter. Convert free-form rules or guidelines into a structured rule list.

**Output requirements**:
1. Begin with a one-line description of the ruleset
2. Prefix each rule with a category in CAPS followed by a colon
3. Keep every rule specific and actionable
4. Use only these categories: TONE, STYLE, FORMAT, BREVITY, CONTENT
5. Write each rule as a bullet point
6. Do not infer, add or expand rules
7. Convert ONLY the rules that are explicitly stated

**Example input**:
make it concise and clear, use emojis when possible

**Example output**:
Description: Rules for clear and concise documentation
Rules:
- BREVITY: Keep it concise
- STYLE: Use emojis when possible
- CONTENT: Maintain clarity

Format the provided rules following this structure."""


DOCUMENTATION_PROMPT = """<instructions>

1. <role>
    - DocBuddy is a documentation improvement assistant for Markdown files.
    - DocBuddy improves clarity, conciseness and technical accuracy.
    - DocBuddy keeps the original meaning while making the text easier to read.

2. <response_format>
    - Respond EXACTLY as: "reason: [WHY THE CHANGE IS NEEDED]\\nsuggestion: [IMPROVED TEXT]"
    - The reason briefly explains the improvement in one or two sentences.
    - The suggestion contains ONLY the improved version of the target line.
    - Example:
      reason: The sentence is fragmented and unclear.
      suggestion: This is the improved, clearer version of the text.

3. <guidelines>
    - Prefer clarity over brevity when the two conflict.
    - Keep Markdown syntax and formatting intact and correct.
    - Preserve the complete meaning of the original text.
    - Split long sentences when it helps readability.
    - Remove redundant and superfluous words.
    - Use the whole document as context so the suggestion fits its surroundings.
    - If no improvement is possible, answer "reason: No improvements needed." and repeat the original text as the suggestion.
    - Only the suggestion replaces the original text, so focus on the TARGET LINE alone.

</instructions>"""


DOCUMENTATION_CONTEXT_SECTION = """

Full document, for reference only:
{document}

Line to improve:
{target_line}"""


CUSTOM_RULES_PROMPT = """You are a documentation custom rules enforcer. Rewrite the given documentation suggestion so that it strictly follows the provided custom rules.

**Custom rules take absolute priority and must be applied without exception.**

**Input**:
1. The original suggestion, formatted as "reason: [explanation]\\nsuggestion: [text]"
2. The custom rules in structured form

**Output requirements**:
1. Keep exactly the same format: "reason: [explanation]\\nsuggestion: [text]"
2. Keep the original reason and end it with "{acknowledgement}"
3. Apply ALL custom rules to the suggestion
4. Custom rules override any previous formatting or style
5. When a custom rule conflicts with the original style, the custom rule wins

**Example input**:
Original:
reason: Improved clarity and structure
suggestion: The function processes user input efficiently.

Custom rules:
- TONE: Be enthusiastic
- STYLE: Use emojis

**Example output**:
reason: Improved clarity and structure. {acknowledgement}
suggestion: This function handles user input blazingly fast! 🚀

Apply the custom rules to this suggestion:
{original_suggestion}

Custom rules to apply:
{custom_rules}"""


@dataclass(frozen=True)
class GenerationRequest:
    """One request to the text generation service."""
    model: str
    system: str
    prompt: str


class PromptBuilder:
    """
    Builds generation requests for each pipeline stage.

    Templates are module constants; the builder only selects the request
    shape and substitutes values.
    """

    def __init__(self, model: str = "gpt-4o-mini", rules_formatter_model: str = "gpt-4"):
        """
        Initialize prompt builder.

        Args:
            model: Model used for suggestions and custom rule application
            rules_formatter_model: Model used to structure free-text rules
        """
        self.model = model
        self.rules_formatter_model = rules_formatter_model

    def build_suggestion_request(self, target_line: str, document: Optional[str] = None) -> GenerationRequest:
        """
        Build the base improvement request.

        With document context, instructions and the target line travel
        together as the prompt and the system role stays empty. Without it,
        the instructions become the system role and the line is the prompt.
        """
        if document:
            prompt = DOCUMENTATION_PROMPT + DOCUMENTATION_CONTEXT_SECTION.format(
                document=document,
                target_line=target_line,
            )
            return GenerationRequest(model=self.model, system="", prompt=prompt)

        return GenerationRequest(model=self.model, system=DOCUMENTATION_PROMPT, prompt=target_line)

    def build_rules_format_request(self, rules: str) -> GenerationRequest:
        """Build the request that structures an author's free-text rules."""
        return GenerationRequest(model=self.rules_formatter_model, system=RULES_FORMATTER_PROMPT, prompt=rules)

    def build_custom_rules_request(self, original_suggestion: str, formatted_rules: str) -> GenerationRequest:
        """Build the request that re-applies a suggestion under custom rules."""
        prompt = CUSTOM_RULES_PROMPT.format(
            acknowledgement=CUSTOM_RULES_ACKNOWLEDGEMENT,
            original_suggestion=original_suggestion,
            custom_rules=formatted_rules,
        )
        return GenerationRequest(model=self.model, system="", prompt=prompt)
