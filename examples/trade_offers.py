import logging
from time import time

from aiohttp import ClientSession

from aiosteamtrade import SteamTradeClient, TradeOfferFilter, TradeOffer, EconItem, RemoteRejected


async def main():
    logging.basicConfig(level=logging.INFO)

    # session must carry cookies of logged in account
    session = ClientSession(raise_for_status=True)

    # STEAM_ID, STEAM_API_KEY, STEAM_SESSION_ID variables or .env file
    async with SteamTradeClient.from_env(session=session) as client:
        async for page in client.trade_offers(
            TradeOfferFilter.RECEIVED_OFFERS | TradeOfferFilter.ACTIVE_ONLY | TradeOfferFilter.ITEM_DESCRIPTIONS,
            int(time()),
        ):
            for offer in page.received:
                if not offer.items_to_give:  # gifts only
                    result = await offer.accept(client)
                    if result.trade_id:
                        items = await client.get_trade_received_items(result.trade_id)
                        print("Received:", [i.description and i.description.market_hash_name for i in items])

        offer = TradeOffer.new(123456789, to_give=[EconItem(asset_id="...", app_id=730, context_id="2")])
        try:
            offer = await offer.send(client, token="...")
        except RemoteRejected as e:
            print("Steam refused the offer:", e)
        else:
            print(offer.id, offer.state.name)

    await session.close()


if __name__ == "__main__":
    import asyncio
    import platform

    platform.system() == "Windows" and asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

    asyncio.run(main())
