"""
Collaborators of the game: media datasets, AI explanations, audio, the
leaderboard client and the background task runner.
"""
