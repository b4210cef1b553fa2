from video_lyrics.cli import main

main()
