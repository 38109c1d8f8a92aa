"""refpoints: реферальная программа и учёт очков."""
