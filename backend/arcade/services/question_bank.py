"""Question bank: default seed data, admin CRUD, template generation and quiz timers."""

import time

from flask import current_app

from arcade import db
from arcade.errors import Conflict, NotFound
from arcade.models import QuizQuestion, TimerSetting
from arcade.services.rules import DIFFICULTIES

DEFAULT_QUESTIONS = {
    'easy': [
        ("What does HTML stand for?",
         ["Hyper Text Markup Language", "High Tech Modern Language",
          "Home Tool Markup Language", "Hyperlink and Text Markup Language"], 0),
        ("Which HTML tag is used for the largest heading?", ["<h6>", "<h1>", "<heading>", "<header>"], 1),
        ("What is the correct HTML tag for inserting a line break?", ["<break>", "<lb>", "<br>", "<newline>"], 2),
        ("Which attribute specifies the URL of the page the link goes to?", ["src", "href", "link", "url"], 1),
        ("What is the correct HTML for creating a hyperlink?",
         ["<a url='http://www.example.com'>Example</a>", "<a href='http://www.example.com'>Example</a>",
          "<a>http://www.example.com</a>", "<link>http://www.example.com</link>"], 1),
        ("Which HTML tag is used to define an internal style sheet?", ["<css>", "<script>", "<style>", "<styles>"], 2),
        ("What is the correct HTML for making a text bold?", ["<bold>", "<b>", "<strong>", "Both <b> and <strong>"], 3),
        ("Which HTML attribute is used to define inline styles?", ["class", "style", "styles", "font"], 1),
    ],
    'medium': [
        ("Which HTML5 element is used to specify a footer for a document or section?",
         ["<bottom>", "<footer>", "<section>", "<end>"], 1),
        ("What is the correct HTML5 element for playing video files?", ["<movie>", "<video>", "<media>", "<film>"], 1),
        ("Which input type is NOT valid in HTML5?", ["email", "url", "datetime", "slider"], 3),
        ("What is the purpose of the 'data-*' attributes in HTML5?",
         ["To store custom data", "To define CSS classes", "To create links", "To add comments"], 0),
        ("Which HTML5 element is used to draw graphics via scripting?", ["<graphics>", "<canvas>", "<draw>", "<svg>"], 1),
        ("What is the correct way to make a number input field?",
         ["<input type='num'>", "<input type='number'>", "<input type='numeric'>", "<number>"], 1),
        ("Which attribute makes an input field required?", ["required", "mandatory", "needed", "must"], 0),
        ("What is the semantic HTML5 element for navigation links?", ["<navigation>", "<nav>", "<menu>", "<links>"], 1),
    ],
    'hard': [
        ("Which HTML5 API is used for client-side storage that persists even after the browser is closed?",
         ["sessionStorage", "localStorage", "cookies", "indexedDB"], 1),
        ("What is the purpose of the 'srcset' attribute in HTML5?",
         ["To set multiple sources", "For responsive images", "To define fallback sources", "All of the above"], 3),
        ("Which HTML5 element is used to represent a scalar measurement within a known range?",
         ["<progress>", "<meter>", "<range>", "<scale>"], 1),
        ("What is the correct way to specify that an input field must be filled out before submitting?",
         ["<input required>", "<input type='required'>", "<input mandatory='true'>", "<input validate='true'>"], 0),
        ("Which HTML5 element represents a disclosure widget from which the user can obtain additional information?",
         ["<summary>", "<details>", "<accordion>", "<expand>"], 1),
        ("What is the purpose of the 'contenteditable' attribute?",
         ["Makes element draggable", "Makes element editable", "Makes element clickable", "Makes element visible"], 1),
        ("Which HTML5 input type is used for selecting a week and year?", ["week", "date-week", "weekly", "week-year"], 0),
        ("What does the 'defer' attribute do in a script tag?",
         ["Delays script execution", "Executes script after page load",
          "Executes script asynchronously", "Prevents script execution"], 1),
    ],
}

GENERATION_TEMPLATES = {
    'easy': [
        ("What does CSS stand for?",
         ["Cascading Style Sheets", "Computer Style Sheets", "Creative Style Sheets", "Colorful Style Sheets"], 0),
        ("Which HTML tag is used to create a paragraph?", ["<paragraph>", "<p>", "<para>", "<text>"], 1),
        ("What is the correct way to comment in HTML?", ["// comment", "/* comment */", "<!-- comment -->", "# comment"], 2),
        ("Which attribute is used to provide alternative text for an image?", ["title", "alt", "src", "text"], 1),
        ("What is the largest heading tag in HTML?", ["<h6>", "<h1>", "<head>", "<header>"], 1),
    ],
    'medium': [
        ("Which CSS property is used to change the text color?", ["font-color", "text-color", "color", "foreground-color"], 2),
        ("What is the correct CSS syntax for making all <p> elements bold?",
         ["p {text-size: bold;}", "p {font-weight: bold;}", "p {text-style: bold;}", "p {font-style: bold;}"], 1),
        ("Which HTML5 element is used for navigation?", ["<navigation>", "<nav>", "<navigate>", "<menu>"], 1),
        ("What does the 'box-sizing' property do in CSS?",
         ["Changes box color", "Controls how element size is calculated", "Sets box position", "Creates box shadow"], 1),
        ("Which CSS property is used to create space between elements?", ["padding", "margin", "spacing", "gap"], 1),
    ],
    'hard': [
        ("What is the purpose of the 'viewport' meta tag?",
         ["Sets page title", "Controls responsive design", "Defines character encoding", "Links stylesheets"], 1),
        ("Which CSS property creates a flexible layout?", ["display: flex", "layout: flex", "flex: true", "flexible: yes"], 0),
        ("What is the difference between 'em' and 'rem' units?",
         ["No difference", "em is relative to parent, rem to root",
          "rem is relative to parent, em to root", "Both are absolute units"], 1),
        ("Which JavaScript method is used to select an element by ID?",
         ["getElementById", "selectById", "findById", "getElementByIdName"], 0),
        ("What is the purpose of CSS Grid?",
         ["Create animations", "Two-dimensional layout system", "Style text", "Handle events"], 1),
    ],
}


def _as_payloads(entries):
    return [
        {'questionId': index, 'question': text, 'options': list(options), 'correctAnswer': correct}
        for index, (text, options, correct) in enumerate(entries, start=1)
    ]


def questions_for(difficulty: str):
    return QuizQuestion.query.filter_by(difficulty=difficulty).order_by(QuizQuestion.question_id).all()


def seed_default_questions(difficulty: str) -> int:
    """Insert the default set for ``difficulty`` if it has no questions yet."""
    if QuizQuestion.query.filter_by(difficulty=difficulty).count() > 0:
        return 0
    for entry in _as_payloads(DEFAULT_QUESTIONS[difficulty]):
        db.session.add(QuizQuestion(
            difficulty=difficulty,
            question_id=entry['questionId'],
            question=entry['question'],
            options=entry['options'],
            correct_answer=entry['correctAnswer'],
        ))
    db.session.commit()
    current_app.logger.info(f"[seed] inserted default {difficulty} questions")
    return len(DEFAULT_QUESTIONS[difficulty])


def seed_all_default_questions() -> int:
    return sum(seed_default_questions(difficulty) for difficulty in DIFFICULTIES)


def list_questions(difficulty=None):
    query = QuizQuestion.query
    if difficulty:
        query = query.filter_by(difficulty=difficulty)
    return query.order_by(QuizQuestion.difficulty, QuizQuestion.question_id).all()


def _slot_taken(difficulty, question_id, exclude_id=None):
    query = QuizQuestion.query.filter_by(difficulty=difficulty, question_id=question_id)
    if exclude_id is not None:
        query = query.filter(QuizQuestion.id != exclude_id)
    return query.first() is not None


def create_question(payload) -> QuizQuestion:
    if _slot_taken(payload.difficulty, payload.question_id):
        raise Conflict(
            f'Question {payload.question_id} already exists for {payload.difficulty} difficulty',
            error_code='QUESTION_EXISTS',
        )
    question = QuizQuestion(
        difficulty=payload.difficulty,
        question_id=payload.question_id,
        question=payload.question,
        options=list(payload.options),
        correct_answer=payload.correct_answer,
    )
    db.session.add(question)
    db.session.commit()
    return question


def update_question(payload) -> QuizQuestion:
    question = db.session.get(QuizQuestion, payload.id)
    if not question:
        raise NotFound('Question not found', error_code='QUESTION_NOT_FOUND')
    if _slot_taken(payload.difficulty, payload.question_id, exclude_id=question.id):
        raise Conflict(
            f'Question {payload.question_id} already exists for {payload.difficulty} difficulty',
            error_code='QUESTION_EXISTS',
        )
    question.difficulty = payload.difficulty
    question.question_id = payload.question_id
    question.question = payload.question
    question.options = list(payload.options)
    question.correct_answer = payload.correct_answer
    db.session.commit()
    return question


def delete_question(question_pk: int) -> None:
    question = db.session.get(QuizQuestion, question_pk)
    if not question:
        raise NotFound('Question not found', error_code='QUESTION_NOT_FOUND')
    db.session.delete(question)
    db.session.commit()


def generate_questions(difficulty: str, persist: bool = False) -> dict:
    """Return the template set for ``difficulty`` after the configured delay.

    With ``persist`` the templates replace slots 1..n of that difficulty.
    The default set is seeded first so the quiz keeps all eight slots.
    """
    delay = float(current_app.config.get('QUESTION_GENERATION_DELAY_SEC', 0) or 0)
    if delay > 0:
        time.sleep(delay)
    generated = _as_payloads(GENERATION_TEMPLATES[difficulty])
    if persist:
        seed_default_questions(difficulty)
        for entry in generated:
            question = QuizQuestion.query.filter_by(difficulty=difficulty, question_id=entry['questionId']).first()
            if question is None:
                question = QuizQuestion(difficulty=difficulty, question_id=entry['questionId'])
                db.session.add(question)
            question.question = entry['question']
            question.options = entry['options']
            question.correct_answer = entry['correctAnswer']
        db.session.commit()
        current_app.logger.info(f"[generate] stored {len(generated)} {difficulty} questions")
    return {'difficulty': difficulty, 'questions': generated, 'persisted': persist}


def timer_settings() -> dict:
    default = int(current_app.config.get('DEFAULT_QUIZ_TIMER_SEC', 300))
    stored = {row.difficulty: row.seconds for row in TimerSetting.query.all()}
    return {difficulty: stored.get(difficulty, default) for difficulty in DIFFICULTIES}


def timer_for(difficulty: str) -> int:
    return timer_settings()[difficulty]


def update_timer_settings(changes: dict) -> dict:
    for difficulty, seconds in changes.items():
        if seconds is None:
            continue
        row = db.session.get(TimerSetting, difficulty)
        if row is None:
            row = TimerSetting(difficulty=difficulty, seconds=seconds)
            db.session.add(row)
        else:
            row.seconds = seconds
    db.session.commit()
    return timer_settings()
