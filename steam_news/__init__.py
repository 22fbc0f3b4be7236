"""Build static news pages from the Folklore Hunter Steam RSS feed."""
