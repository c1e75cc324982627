from duoparty import db
import time
import uuid

QUESTION_TYPES = ('QUESTION', 'CHALLENGE')


def _uuid():
    return str(uuid.uuid4())


class GameMode(db.Model):
    __tablename__ = 'game_mode'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    slug = db.Column(db.String(64), unique=True, nullable=False, index=True)
    name = db.Column(db.String(128), nullable=False)
    description = db.Column(db.Text, nullable=True)
    emoji = db.Column(db.String(16), nullable=True)
    emoji_url = db.Column(db.String(512), nullable=True)
    image_url = db.Column(db.String(512), nullable=True)
    questions = db.relationship('Question', back_populates='game_mode', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'slug': self.slug,
            'name': self.name,
            'description': self.description,
            'emoji': self.emoji,
            'emojiUrl': self.emoji_url,
            'imageUrl': self.image_url,
        }


class Question(db.Model):
    __tablename__ = 'question'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    mode = db.Column(db.String(64), db.ForeignKey('game_mode.slug'), nullable=False, index=True)
    content = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(16), nullable=False, default='QUESTION')  # QUESTION, CHALLENGE
    points = db.Column(db.Integer, nullable=False, default=10)
    game_mode = db.relationship('GameMode', back_populates='questions')

    def to_dict(self):
        return {
            'id': self.id,
            'content': self.content,
            'type': self.type,
            'points': self.points,
        }


class QuestionReport(db.Model):
    __tablename__ = 'question_report'
    id = db.Column(db.Integer, primary_key=True)
    question_id = db.Column(db.String(36), nullable=False, index=True)
    game_id = db.Column(db.String(36), nullable=True)
    room_id = db.Column(db.String(36), nullable=True)
    round = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.Float, nullable=False, default=time.time)

    def to_dict(self):
        return {
            'id': self.id,
            'question_id': self.question_id,
            'game_id': self.game_id,
            'room_id': self.room_id,
            'round': self.round,
            'created_at': self.created_at,
        }
