"""
Default prompt text for the assistant handlers.

System prompts differ per profile: the lenient fallback model has no JSON
mode, so its system prompt insists on JSON-only replies.
"""

MUTATION_SYSTEM_PROMPT_STRICT = (
    "You are a flowchart design assistant that transforms flowcharts based on text instructions."
)

MUTATION_SYSTEM_PROMPT_LENIENT = (
    "You are a flowchart design assistant. Always respond with valid JSON only, no extra text."
)

FLOWCHART_STRUCTURE_NOTES = """FLOWCHART JSON STRUCTURE DETAILS:
This flowchart system uses a JSON structure with the following components:

1. Nodes - Each node can have:
   - Custom labels, text boxes, toggles, dropdowns, and input fields
   - Connection handles on different sides (input/output on top/bottom/left/right)
   - Custom styling (background color, text color)
   - State information (default, active, double-active, important)

2. Node data structure:
   "data": {
     "elements": {
       "label": { "visible": true, "text": "Node Label" },
       "textBoxes": [{ "visible": true, "text": "Text content" }],
       "toggles": [{ "visible": true, "text": "Toggle Label", "value": true/false }],
       "dropdowns": [{
         "visible": true,
         "label": "Dropdown Label",
         "options": ["Option 1", "Option 2"],
         "selected": "Option 1"
       }],
       "inputFields": [{ "visible": true, "placeholder": "Placeholder text", "value": "" }]
     },
     "hasInputHandle": true/false,
     "hasOutputHandle": true/false,
     "hasTopInputHandle": true/false,
     "hasBottomInputHandle": true/false,
     "hasTopOutputHandle": true/false,
     "hasBottomOutputHandle": true/false,
     "bgColor": "#hexcolor",
     "textColor": "#hexcolor",
     "state": "default" | "active" | "double-active",
     "important": true/false
   }

3. Edges - Connect nodes with the following properties:
   - Source node ID and handle
   - Target node ID and handle
   - Unique edge ID"""

MUTATION_RULES = """INSTRUCTIONS:
1. Carefully analyze the user's instruction and the current flowchart structure
2. Make ONLY the changes requested by the user
3. Preserve all node IDs, positions, and other properties not mentioned in the user's instruction
4. Do not remove nodes unless the user explicitly asks for it
5. Ensure all connections between nodes remain valid: every edge source and target must be an existing node id
6. Return a complete, valid JSON object with the entire modified flowchart

Your response should be a valid JSON object that can replace the current flowchart. Include both nodes and edges arrays, even if only one is modified.

IMPORTANT: YOUR RESPONSE MUST BE ONLY A VALID JSON OBJECT AND NOTHING ELSE. DO NOT INCLUDE ANY EXPLANATION TEXT."""

CLUSTER_SYSTEM_PROMPT = (
    "You are a research analysis assistant that categorizes concerns about research studies."
)

CLUSTER_REQUIREMENTS = """REQUIREMENTS:
1. Group similar concerns based on common themes found in the *text* of the concerns. DO NOT group concerns by their existing `tag` (e.g., BIAS, CONFOUND). The themes should reflect the content and meaning of the concerns themselves.
2. AVOID creating themes that simply mirror the existing tags. For example, do not create themes called "BIAS CONCERNS" or "CONFOUNDING FACTORS" that simply group all concerns sharing a tag.
3. Look for specific research issues, problems, variables, or methodological aspects mentioned in the concern texts themselves, and create themes around those specific issues.
4. {count_guidance}
5. Assign each group a concise 1-2 word name that is specific and descriptive of the actual issue identified (e.g., "DATA INTEGRITY", "SAMPLE SELECTION", "CONTROL VARIABLES").
6. Strive for a relatively balanced distribution of concerns across the identified themes. Avoid creating a single theme that contains a vast majority of the concerns.
7. DO NOT modify the original content of any concern.
8. Include EVERY concern in exactly one group - do not exclude or repeat any, and do not invent new ids."""

CLUSTER_DATA_FORMAT = """CONCERN DATA FORMAT:
Each concern has these attributes:
- id: Unique identifier
- labels: Names of the study phases/processes the concern is attached to
- tag: Category of concern (e.g., BIAS, CONFOUND, etc.)
- text: The actual concern text"""

CLUSTER_OUTPUT_FORMAT = """OUTPUT FORMAT:
Return a JSON object with this structure:
{
  "themes": [
    {
      "name": "THEME_NAME",
      "items": [{"id": "CONCERN_ID"}, ...]
    }
  ]
}

Ensure your response is valid JSON that can be parsed directly."""

FEW_ITEMS_GUIDANCE = (
    "There are fewer than 3 concerns; still organize them into appropriate themes based on their specific content."
)
