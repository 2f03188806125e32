"""Platform adapters: logging and the MusicBrainz web service client."""
