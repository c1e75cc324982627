"""Starter catalog for ``flask db-reset``."""
from duoparty import db
from duoparty.models import GameMode, Question

GAME_MODES = [
    {'slug': 'chill', 'name': 'Chill', 'emoji': '😌',
     'description': 'Easy-going questions and harmless challenges.'},
    {'slug': 'grrr', 'name': 'Grrr', 'emoji': '😈',
     'description': 'Spicier questions and bolder challenges.'},
]

QUESTIONS = {
    'chill': [
        ('QUESTION', 'What was your favourite cartoon as a kid?', 5),
        ('QUESTION', 'Which song do you secretly know all the lyrics to?', 5),
        ('QUESTION', 'What is the best meal you have ever had?', 5),
        ('QUESTION', 'Where would you go on a one-way ticket?', 10),
        ('QUESTION', 'What is your most useless talent?', 10),
        ('QUESTION', 'Which fictional character would you date?', 10),
        ('CHALLENGE', 'Do your best impression of the other player.', 10),
        ('CHALLENGE', 'Sing the chorus of the last song you listened to.', 10),
        ('CHALLENGE', 'Speak only in questions until your next turn.', 15),
        ('CHALLENGE', 'Tell a joke; the judge must not laugh.', 15),
        ('CHALLENGE', 'Balance a spoon on your nose for ten seconds.', 15),
        ('CHALLENGE', 'Describe your day using only three words.', 5),
    ],
    'grrr': [
        ('QUESTION', 'What is the pettiest thing you have ever done?', 10),
        ('QUESTION', 'Which lie do you tell most often?', 10),
        ('QUESTION', 'What is your most embarrassing search history entry?', 15),
        ('QUESTION', 'Who was your worst date and why?', 15),
        ('QUESTION', 'What would you never tell your parents?', 20),
        ('QUESTION', 'What is the worst gift you pretended to love?', 10),
        ('CHALLENGE', 'Let the other player post a story on your account.', 20),
        ('CHALLENGE', 'Read your last sent message out loud.', 15),
        ('CHALLENGE', 'Call a friend and sing them happy birthday.', 20),
        ('CHALLENGE', 'Show the last photo in your gallery.', 15),
        ('CHALLENGE', 'Do ten push-ups while telling a secret.', 15),
        ('CHALLENGE', 'Swap phones with the other player for one round.', 20),
    ],
}


def seed_catalog():
    """Insert the starter modes and questions; returns (modes, questions) added."""
    n_modes = n_questions = 0
    for spec in GAME_MODES:
        if GameMode.query.filter_by(slug=spec['slug']).first():
            continue
        db.session.add(GameMode(**spec))
        n_modes += 1
        for qtype, content, points in QUESTIONS.get(spec['slug'], []):
            db.session.add(Question(mode=spec['slug'], type=qtype, content=content, points=points))
            n_questions += 1
    db.session.commit()
    return n_modes, n_questions
