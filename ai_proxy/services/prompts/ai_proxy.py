"""Instruction templates sent to Gemini by the AI proxy."""

NLU_EXTRACTION_PROMPT = '''You are a health assistant. Extract structured intents from the user input.

User input: "{payload}"

Supported intents:
1. LOG_FOOD - log food intake
2. LOG_WORKOUT - log workout/activity
3. LOG_WEIGHT - log body weight
4. LOG_CYCLE - log cycle phase
5. ADD_PANTRY - add pantry item

Return only JSON in this shape:
{{
  "intents": [
    {{
      "type": "LOG_FOOD",
      "confidence": 0.92,
      "parameters": {{
        "foodItems": ["eggs"],
        "mealType": "breakfast",
        "quantity": "2 eggs"
      }}
    }}
  ]
}}'''

SUPPORTED_NLU_INTENTS = (
    "LOG_FOOD",
    "LOG_WORKOUT",
    "LOG_WEIGHT",
    "LOG_CYCLE",
    "ADD_PANTRY",
)

DEFAULT_VISION_PROMPT = (
    "Identify the food items and estimate calories, protein, carbs, and fats. "
    "Return JSON: { name, calories, protein, carbs, fats }"
)

DEFAULT_SPEECH_PROMPT = "Transcribe the audio verbatim. Return only the transcript text."
