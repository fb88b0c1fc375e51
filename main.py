#!/usr/bin/env python

import argparse
import asyncio
import sys
from board.browse import SHARE_URLS, HistoryCursor, share_text, share_url
from board.db import DB_TABLES, KeyValueStore
from board.logging import app_logger, log_error, setup_logging
from board.models import Quote
from board.playback import PlaybackController
from board.sources import PhotoSource, QuoteSource, TrackSource
from board.storage import CollectionsManager
from config import DB_NAME, DEFAULT_QUOTE_TAG, LOG_FILE, LOG_LEVEL, THEMES, __version__
from eliot import log_message, start_action

VOLUME_STEP = 0.1

PLAYER_HELP = "n: next  p: previous  t: play/pause  +/-: volume  q: quit"


def print_quote(quote: Quote) -> None:
    print(share_text(quote))
    if quote.tags:
        print(f"  #{' #'.join(quote.tags)}")


async def cmd_quote(args, collections: CollectionsManager) -> int:
    quote = await QuoteSource().random_quote(args.tag)
    photo = await PhotoSource().random_photo(args.photo_query)
    collections.add_to_history(quote)
    print_quote(quote)
    if photo:
        print(f"  photo: {photo.url} by {photo.photographer}")
    if args.save:
        saved = collections.save_favorite(quote, photo)
        print("Saved to favorites!" if saved else "Already in favorites")
    return 0


async def cmd_search(args, collections: CollectionsManager) -> int:
    results = await QuoteSource().search_quotes(args.query, args.limit)
    if not results:
        print("No quotes found")
        return 1
    for quote in results:
        collections.add_to_history(quote)
        print_quote(quote)
    return 0


def cmd_favorites(args, collections: CollectionsManager) -> int:
    if args.clear:
        collections.clear_favorites()
        print("All favorites cleared")
        return 0
    if args.remove:
        collections.remove_favorite(args.remove)
        print("Removed from favorites")
        return 0

    favorites = collections.search_favorites(args.search or '')
    if not favorites:
        print("No favorites saved yet")
    for fav in favorites:
        print(f"{fav.id}  \"{fav.quote_text}\" — {fav.author}  ({fav.saved_at})")
    return 0


def cmd_history(args, collections: CollectionsManager) -> int:
    if args.clear:
        collections.clear_history()
        print("History cleared")
        return 0
    for position, quote in enumerate(collections.list_history(), start=1):
        print(f"{position:>3}. ", end='')
        print_quote(quote)
    return 0


def cmd_theme(args, collections: CollectionsManager) -> int:
    if args.value == 'toggle':
        theme = collections.toggle_theme()
    elif args.value:
        collections.save_theme(args.value)
        theme = collections.get_theme()
    else:
        theme = collections.get_theme()
    print(theme.value)
    return 0


def cmd_share(args, collections: CollectionsManager) -> int:
    cursor = HistoryCursor(collections)
    quote = cursor.sync()
    if args.back:
        quote = cursor.show(cursor.index - args.back)
    if quote is None:
        print("Nothing to share yet")
        return 1
    print(share_url(quote, args.network))
    return 0


async def cmd_play(args, store: KeyValueStore) -> int:
    player = PlaybackController(store, TrackSource())
    player.on_playback_change(lambda playing: print("▶ playing" if playing else "⏸ paused"))
    if args.volume is not None:
        player.set_volume(args.volume)

    tracks = await player.fetch_track_list()
    if not tracks:
        print("No music available")
        return 1

    index = args.index if args.index is not None else player.get_saved_index()
    track = await player.select_track(index)
    print(f"♪ {track.display_name}")
    print(PLAYER_HELP)

    try:
        while True:
            command = (await asyncio.to_thread(input, "> ")).strip()
            await player.notify_interaction('keydown')
            if command == 'q':
                break
            if command == 'n':
                track = await player.next()
            elif command == 'p':
                track = await player.previous()
            elif command in ('t', ''):
                await player.toggle_playback()
                continue
            elif command in ('+', '-'):
                step = VOLUME_STEP if command == '+' else -VOLUME_STEP
                player.set_volume(min(1.0, max(0.0, round(player.get_volume() + step, 2))))
                print(f"volume {player.get_volume():.0%}")
                continue
            else:
                print(PLAYER_HELP)
                continue
            print(f"♪ {track.display_name}")
    except EOFError:
        pass
    finally:
        player.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='inspo', description="Daily inspiration board")
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('--db', default=DB_NAME, help="SQLite file holding favorites, history and settings")
    subparsers = parser.add_subparsers(dest='command', required=True)

    quote = subparsers.add_parser('quote', help="Show a random quote and background photo")
    quote.add_argument('--tag', default=DEFAULT_QUOTE_TAG)
    quote.add_argument('--photo-query', default='')
    quote.add_argument('--save', action='store_true', help="Save the quote to favorites")

    search = subparsers.add_parser('search', help="Search quotes by text or author")
    search.add_argument('query')
    search.add_argument('--limit', type=int, default=3)

    favorites = subparsers.add_parser('favorites', help="List or manage favorites")
    favorites.add_argument('--search')
    favorites.add_argument('--remove', metavar='ID')
    favorites.add_argument('--clear', action='store_true')

    history = subparsers.add_parser('history', help="List recently viewed quotes")
    history.add_argument('--clear', action='store_true')

    theme = subparsers.add_parser('theme', help="Show or change the theme")
    theme.add_argument('value', nargs='?', choices=[*THEMES, 'toggle'])

    share = subparsers.add_parser('share', help="Print a share link for a quote from history")
    share.add_argument('--network', choices=sorted(SHARE_URLS), default='twitter')
    share.add_argument('--back', type=int, default=0, help="How many quotes back from the newest")

    play = subparsers.add_parser('play', help="Play background music previews")
    play.add_argument('--index', type=int)
    play.add_argument('--volume', type=float)

    return parser


async def run(args) -> int:
    store = KeyValueStore(args.db, DB_TABLES)
    collections = CollectionsManager(store)
    try:
        if args.command == 'quote':
            return await cmd_quote(args, collections)
        if args.command == 'search':
            return await cmd_search(args, collections)
        if args.command == 'favorites':
            return cmd_favorites(args, collections)
        if args.command == 'history':
            return cmd_history(args, collections)
        if args.command == 'theme':
            return cmd_theme(args, collections)
        if args.command == 'share':
            return cmd_share(args, collections)
        return await cmd_play(args, store)
    finally:
        store.close()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(LOG_LEVEL, LOG_FILE, stream=sys.stderr)

    with start_action(app_logger, "application_startup", command=args.command):
        try:
            log_message(message_type="application_init", message=f"Starting inspo {args.command}")
            return asyncio.run(run(args))
        except KeyboardInterrupt:
            return 130
        except Exception as e:
            log_error(app_logger, e, context="application_startup")
            print(f"Error: {e}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    sys.exit(main())
