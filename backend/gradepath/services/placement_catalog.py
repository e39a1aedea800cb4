"""
Static placement assessment catalog.

Two questions per school grade and three Common Entrance questions. The
order is fixed; answers are matched to questions by position.
"""

from typing import Tuple

from gradepath.services.scoring import Question

CALCULATOR = "calculator"
BOOK = "book-open"
BEAKER = "beaker"

PLACEMENT_QUESTIONS: Tuple[Question, ...] = (
    # Grade 1
    Question(1, "Mathematics", "What is 5 + 3?", ("6", "7", "8", "9"), 2, 1, CALCULATOR),
    Question(2, "English", 'Which letter comes after "B" in the alphabet?', ("A", "C", "D", "E"), 1, 1, BOOK),
    # Grade 2
    Question(3, "Mathematics", "What is 12 - 7?", ("4", "5", "6", "7"), 1, 2, CALCULATOR),
    Question(4, "English", "Choose the correct spelling:", ("kat", "cat", "catt", "cta"), 1, 2, BOOK),
    # Grade 3
    Question(5, "Mathematics", "What is 6 × 4?", ("20", "22", "24", "26"), 2, 3, CALCULATOR),
    Question(6, "Science", "Which of these is a living thing?", ("Rock", "Water", "Tree", "Chair"), 2, 3, BEAKER),
    # Grade 4
    Question(7, "Mathematics", "What is 48 ÷ 6?", ("6", "7", "8", "9"), 2, 4, CALCULATOR),
    Question(8, "English", 'What is the plural of "child"?', ("childs", "children", "childes", "child"), 1, 4, BOOK),
    # Grade 5
    Question(9, "Mathematics", "What is 0.5 + 0.25?", ("0.55", "0.65", "0.75", "0.85"), 2, 5, CALCULATOR),
    Question(
        10, "Science", "What is the process by which plants make their own food?",
        ("Respiration", "Photosynthesis", "Digestion", "Transpiration"), 1, 5, BEAKER,
    ),
    # Grade 6
    Question(11, "Mathematics", "Solve for x: 3x + 4 = 19", ("3", "5", "7", "9"), 1, 6, CALCULATOR),
    Question(
        12, "English", 'Which is the correct form of the verb? "She _____ to school every day."',
        ("go", "goes", "going", "gone"), 1, 6, BOOK,
    ),
    # Common Entrance
    Question(13, "Mathematics", "If a:b = 2:3 and b:c = 4:5, what is a:c?", ("2:5", "8:15", "6:10", "3:7"), 1, 7, CALCULATOR),
    Question(
        14, "English", 'Identify the figure of speech: "The classroom was a zoo."',
        ("Simile", "Metaphor", "Personification", "Hyperbole"), 1, 7, BOOK,
    ),
    Question(15, "Science", "What is the chemical symbol for water?", ("H2O", "O2", "CO2", "NaCl"), 0, 7, BEAKER),
)
