import json
from ..models import Difficulty, MAX_LEVEL, Topic

class PromptBuilder:
	def build(self, *, topic: Topic, difficulty: Difficulty, level: int) -> str:
		shape = {
			"promptText": "question text",
			"options": ["answer1", "answer2", "answer3", "answer4"],
			"correctIndex": 0,
		}
		return (
			f"Generate one {topic.display_name} question of {difficulty.value} difficulty (level {level}/{MAX_LEVEL}).\n"
			"\n"
			"Reply ONLY with a valid JSON object in exactly this format:\n"
			f"{json.dumps(shape, indent=2)}\n"
			"\n"
			"where \"correctIndex\" is the zero-based index (0-3) of the correct answer in the \"options\" array.\n"
			"Do not add any text before or after the JSON."
		)
