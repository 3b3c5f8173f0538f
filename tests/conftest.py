from config import ApplicationConfig

# bcrypt's minimum cost keeps the suite fast
ApplicationConfig.BCRYPT_ROUNDS = 4
