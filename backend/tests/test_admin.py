from arcade.models import QuizQuestion, TimerSetting
from arcade.services.question_bank import DEFAULT_QUESTIONS, GENERATION_TEMPLATES


def _question(**overrides):
    payload = {
        'difficulty': 'easy',
        'questionId': 1,
        'question': 'What does DOM stand for?',
        'options': ['Document Object Model', 'Data Object Map', 'Display Order Mode', 'None'],
        'correctAnswer': 0,
    }
    payload.update(overrides)
    return payload


def _play(client, register, finish_quiz, name, code, score, mine=0, pro=0):
    session_id = register(name, code)['sessionId']
    finish_quiz(session_id, score)
    if mine or pro:
        client.post('/api/mine-game/complete', json={
            'sessionId': session_id, 'finalMineScore': mine, 'finalProScore': pro,
        })
    return session_id


def test_admin_routes_require_header(client):
    assert client.get('/api/admin/questions').status_code == 401
    res = client.get('/api/admin/leaderboard', headers={'X-Admin-Code': 'wrong'})
    assert res.status_code == 401
    assert res.get_json()['error'] == 'UNAUTHORIZED'


def test_question_crud(client, admin_headers):
    res = client.post('/api/admin/questions', json=_question(), headers=admin_headers)
    assert res.status_code == 201
    created = res.get_json()['data']
    assert created['questionId'] == 1

    res = client.post('/api/admin/questions', json=_question(question='Other'), headers=admin_headers)
    assert res.status_code == 409
    assert res.get_json()['error'] == 'QUESTION_EXISTS'

    res = client.put('/api/admin/questions', json=_question(_id=created['id'], questionId=2, correctAnswer=3),
                     headers=admin_headers)
    assert res.status_code == 200
    assert res.get_json()['data']['questionId'] == 2
    assert res.get_json()['data']['correctAnswer'] == 3

    listed = client.get('/api/admin/questions?difficulty=easy', headers=admin_headers).get_json()['data']
    assert [q['questionId'] for q in listed] == [2]

    res = client.delete(f"/api/admin/questions?id={created['id']}", headers=admin_headers)
    assert res.status_code == 200
    assert QuizQuestion.query.count() == 0


def test_update_collision_and_missing(client, admin_headers):
    first = client.post('/api/admin/questions', json=_question(), headers=admin_headers).get_json()['data']
    client.post('/api/admin/questions', json=_question(questionId=2), headers=admin_headers)
    res = client.put('/api/admin/questions', json=_question(id=first['id'], questionId=2), headers=admin_headers)
    assert res.status_code == 409
    res = client.put('/api/admin/questions', json=_question(id=999), headers=admin_headers)
    assert res.status_code == 404


def test_delete_requires_known_id(client, admin_headers):
    res = client.delete('/api/admin/questions', headers=admin_headers)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'MISSING_ID'
    assert client.delete('/api/admin/questions?id=42', headers=admin_headers).status_code == 404


def test_question_payload_validation(client, admin_headers):
    res = client.post('/api/admin/questions', json=_question(options=['a', 'b', 'c']), headers=admin_headers)
    assert res.status_code == 400
    res = client.post('/api/admin/questions', json=_question(options=['a', ' ', 'c', 'd']), headers=admin_headers)
    assert res.status_code == 400


def test_generate_questions(client, admin_headers):
    res = client.post('/api/admin/questions/generate', json={'difficulty': 'hard'}, headers=admin_headers)
    assert res.status_code == 200
    data = res.get_json()['data']
    assert data['persisted'] is False
    assert len(data['questions']) == 5
    assert QuizQuestion.query.count() == 0

    res = client.post('/api/admin/questions/generate', json={'difficulty': 'hard', 'persist': True},
                      headers=admin_headers)
    assert res.get_json()['data']['persisted'] is True


def test_persisted_generation_on_empty_bank_keeps_eight_questions(client, admin_headers):
    generated = client.post('/api/admin/questions/generate', json={'difficulty': 'easy', 'persist': True},
                            headers=admin_headers).get_json()['data']['questions']

    quiz = client.get('/api/quiz/questions?difficulty=easy').get_json()['data']
    assert quiz['totalQuestions'] == 8
    texts = [q['question'] for q in quiz['questions']]
    assert texts[:5] == [q['question'] for q in generated]
    assert texts[5:] == [text for text, _, _ in DEFAULT_QUESTIONS['easy'][5:]]


def test_persisted_generation_on_seeded_bank_replaces_first_slots(client, admin_headers):
    client.get('/api/quiz/questions?difficulty=medium')
    client.post('/api/admin/questions/generate', json={'difficulty': 'medium', 'persist': True},
                headers=admin_headers)
    questions = QuizQuestion.query.filter_by(difficulty='medium').order_by(QuizQuestion.question_id).all()
    assert [q.question_id for q in questions] == list(range(1, 9))
    assert questions[0].question == GENERATION_TEMPLATES['medium'][0][0]
    assert questions[7].question == DEFAULT_QUESTIONS['medium'][7][0]


def test_timers(client, admin_headers):
    res = client.get('/api/admin/timers', headers=admin_headers)
    assert res.get_json()['data'] == {'easy': 300, 'medium': 300, 'hard': 300}

    res = client.put('/api/admin/timers', json={'hard': 120}, headers=admin_headers)
    assert res.status_code == 200
    assert res.get_json()['data'] == {'easy': 300, 'medium': 300, 'hard': 120}
    assert TimerSetting.query.count() == 1

    assert client.put('/api/admin/timers', json={'easy': 5}, headers=admin_headers).status_code == 400
    quiz = client.get('/api/quiz/questions?difficulty=hard').get_json()['data']
    assert quiz['timeLimit'] == 120


def test_leaderboard(client, admin_headers, register, finish_quiz):
    _play(client, register, finish_quiz, 'Alpha', 'EASY123', 7, mine=200, pro=200)
    _play(client, register, finish_quiz, 'Bravo', 'HARD789', 4, mine=100)
    _play(client, register, finish_quiz, 'Charlie', 'EASY123', 2)

    res = client.get('/api/admin/leaderboard', headers=admin_headers)
    assert res.status_code == 200
    data = res.get_json()['data']
    assert [row['teamName'] for row in data['leaderboard']] == ['Alpha', 'Bravo', 'Charlie']
    assert data['leaderboard'][0]['grandTotal'] == 470
    assert data['summary']['totalTeams'] == 3
    assert data['summary']['completedSessions'] == 2

    easy = client.get('/api/admin/leaderboard?difficulty=easy&limit=1', headers=admin_headers).get_json()['data']
    assert [row['teamName'] for row in easy['leaderboard']] == ['Alpha']

    assert client.get('/api/admin/leaderboard?sortBy=name', headers=admin_headers).status_code == 400


def test_analytics(client, admin_headers, register, finish_quiz):
    _play(client, register, finish_quiz, 'Alpha', 'EASY123', 7, mine=200, pro=200)
    _play(client, register, finish_quiz, 'Bravo', 'HARD789', 4)

    res = client.get('/api/admin/analytics?timeRange=all', headers=admin_headers)
    assert res.status_code == 200
    data = res.get_json()['data']
    assert data['overview']['totalTeams'] == 2
    assert data['overview']['completedQuizzes'] == 2
    assert data['overview']['completedMineGames'] == 1
    assert data['quizStatistics']['highestScore'] == 7
    assert data['quizStatistics']['lowestScore'] == 4
    assert data['difficultyDistribution'] == {'easy': 1, 'hard': 1}
    assert len(data['recentActivity']) == 2

    hard = client.get('/api/admin/analytics?timeRange=24h&difficulty=hard', headers=admin_headers).get_json()['data']
    assert hard['overview']['totalTeams'] == 1
    assert hard['mineGameStatistics']['averageMineScore'] == 0

    assert client.get('/api/admin/analytics?timeRange=2y', headers=admin_headers).status_code == 400


def test_team_listing_and_lookup(client, admin_headers, register, finish_quiz):
    _play(client, register, finish_quiz, 'Alpha', 'EASY123', 7, mine=100)
    register('Bravo', 'MED456')

    data = client.get('/api/admin/teams', headers=admin_headers).get_json()['data']
    assert data['totalTeams'] == 2
    assert data['completedTeams'] == 1
    assert data['completedOnly'][0]['teamName'] == 'Alpha'

    res = client.post('/api/admin/teams', json={'teamName': 'bravo'}, headers=admin_headers)
    assert res.status_code == 200
    assert res.get_json()['data']['difficulty'] == 'medium'
    assert res.get_json()['data']['sessions'][0]['status'] == 'active'

    alpha = client.post('/api/admin/teams', json={'teamName': 'ALPHA'}, headers=admin_headers).get_json()['data']
    assert alpha['sessions'][0]['status'] == 'mine_completed'
    assert alpha['sessions'][0]['actions'] == []
    assert alpha['sessions'][0]['responses'] == []

    assert client.post('/api/admin/teams', json={'teamName': 'Zulu'}, headers=admin_headers).status_code == 404
    assert client.post('/api/admin/teams', json={}, headers=admin_headers).status_code == 400


def test_leaderboard_sorting_filter_and_tallies(client, admin_headers, register, finish_quiz):
    alpha = register('Alpha', 'EASY123')['sessionId']
    for question_id, selected in ((1, 0), (2, 0), (3, 1)):
        client.post('/api/quiz/submit-answer', json={
            'sessionId': alpha, 'questionId': question_id, 'question': f'Q{question_id}',
            'options': ['a', 'b', 'c', 'd'], 'selectedAnswer': selected, 'correctAnswer': 0,
        })
    finish_quiz(alpha, 6)
    for x, cell_type in ((0, 'mine'), (1, 'blank'), (2, 'pro')):
        client.post('/api/mine-game/action', json={'sessionId': alpha, 'cellX': x, 'cellY': 0, 'cellType': cell_type})
    _play(client, register, finish_quiz, 'Echo', 'EASY123', 8)
    _play(client, register, finish_quiz, 'Foxtrot', 'HARD789', 8)

    data = client.get('/api/admin/leaderboard?difficulty=easy&sortBy=quizScore', headers=admin_headers).get_json()['data']
    rows = data['leaderboard']
    assert [row['teamName'] for row in rows] == ['Echo', 'Alpha']
    row = rows[1]
    assert row['totalQuestions'] == 3
    assert row['correctAnswers'] == 2
    assert row['minesFound'] == 1
    assert row['prosFound'] == 1
    assert row['totalMineActions'] == 3
    assert row['mineSuccessRate'] == 2 / 3 * 100
    assert rows[0]['totalMineActions'] == 0

    top = client.get('/api/admin/leaderboard?sortBy=totalScore&limit=1', headers=admin_headers).get_json()['data']
    assert [row['teamName'] for row in top['leaderboard']] == ['Alpha']
    assert top['leaderboard'][0]['totalScore'] == 60 + 100 + 200
